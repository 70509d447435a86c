"""Reporting utilities for neurograph."""

from .metrics import CsvSink, HistoryCapture, JsonlSink
from .summary import compute_auc, summarize_curve, write_summary

__all__ = [
    "CsvSink",
    "HistoryCapture",
    "JsonlSink",
    "compute_auc",
    "summarize_curve",
    "write_summary",
]
