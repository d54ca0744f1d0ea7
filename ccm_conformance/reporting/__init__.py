"""Reporting module - JSON and text reports."""

from .json_reporter import JsonReporter
from .text_reporter import TextReporter

__all__ = ["JsonReporter", "TextReporter"]
