"""
Reporters Layer

Rich terminal reporter and JSON reporter.
"""

from pathlister.reporters.base import Reporter, ListingResult
from pathlister.reporters.rich_reporter import RichReporter
from pathlister.reporters.json_reporter import JsonReporter

__all__ = [
    "Reporter",
    "ListingResult",
    "RichReporter",
    "JsonReporter",
]
