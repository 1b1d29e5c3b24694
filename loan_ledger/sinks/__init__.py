"""Output sinks for exporting ledger records."""

from loan_ledger.sinks.console import ConsoleSink
from loan_ledger.sinks.json_file import JsonFileSink

__all__ = ["ConsoleSink", "JsonFileSink"]
