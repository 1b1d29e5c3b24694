"""Console sink for previewing schedules and scenario output."""

import json
from typing import Any, TextIO

from loan_ledger.sinks.serialization import to_dict


class ConsoleSink:
    """Output records to a text stream (stdout by default)."""

    def __init__(
        self,
        pretty: bool = True,
        max_records: int | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output.
        max_records : int | None
            Maximum records to print per batch (None for all).
        stream : TextIO | None
            Destination stream; ``sys.stdout`` when not given.
        """
        self.pretty = pretty
        self.max_records = max_records
        self.stream = stream
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records."""
        self._print(f"\n{'='*60}")
        self._print(f"Entity: {entity_type} ({len(records)} records)")
        self._print("=" * 60)

        display_records = records[: self.max_records] if self.max_records else records
        indent = 2 if self.pretty else None
        for record in display_records:
            self._print(json.dumps(to_dict(record), indent=indent, ensure_ascii=False))

        if self.max_records and len(records) > self.max_records:
            self._print(f"... and {len(records) - self.max_records} more records")

        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def write_table(self, title: str, rows: list[dict[str, Any]], columns: list[str]) -> None:
        """Print rows as a fixed-width table (amortization preview)."""
        widths = {
            column: max([len(column)] + [len(str(row.get(column, ""))) for row in rows])
            for column in columns
        }
        self._print(f"\n{title}")
        self._print("  ".join(column.rjust(widths[column]) for column in columns))
        self._print("  ".join("-" * widths[column] for column in columns))
        for row in rows:
            self._print("  ".join(str(row.get(column, "")).rjust(widths[column]) for column in columns))
        self._counts[title] = self._counts.get(title, 0) + len(rows)

    def close(self) -> None:
        """Print summary and close."""
        self._print(f"\n{'='*60}")
        self._print("Console Sink Summary")
        self._print("=" * 60)
        for entity_type, count in self._counts.items():
            self._print(f"  {entity_type}: {count} records")

    def _print(self, text: str) -> None:
        print(text, file=self.stream)
