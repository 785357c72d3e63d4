"""
JSON reporter - machine readable listing for build pipelines
"""

import json
import sys
from dataclasses import asdict
from typing import TextIO

from pathlister.core.models import FileRecord
from pathlister.reporters.base import ListingResult


def _record_to_dict(record: FileRecord) -> dict:
    return {**asdict(record), "state": record.state.value}


class JsonReporter:
    """JSON reporter"""

    def __init__(self, output: TextIO | None = None):
        self.output = output or sys.stdout

    def report(self, result: ListingResult) -> None:
        """Print the listing as JSON"""
        report_data: dict = {"root": result.root}
        if result.files is not None:
            report_data["files"] = [_record_to_dict(record) for record in result.files]
            report_data["deleted"] = [_record_to_dict(record) for record in result.deleted]
        if result.directories is not None:
            report_data["directories"] = list(result.directories)
        report_data["errors"] = [
            {"path": path, "message": message} for path, message in result.errors
        ]
        report_data["stats"] = result.stats

        json_str = json.dumps(report_data, indent=2, ensure_ascii=False)
        print(json_str, file=self.output)
