#!/usr/bin/env python3
"""Preview a loan quote and its repayment schedule.

Examples
--------
    python scripts/preview_schedule.py --principal 12000 --rate 18 --days 365 \
        --interest-type flat
    python scripts/preview_schedule.py --principal 5000 --rate 24 --days 120 \
        --schedule flexible --json
    python scripts/preview_schedule.py --scenario 20 --seed 7 --output local/
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.config import LedgerConfig, ScenarioConfig
from loan_ledger.engine import ScheduleGenerator, TermsCalculator
from loan_ledger.exceptions import LedgerError
from loan_ledger.logging import get_logger, setup_logging
from loan_ledger.models.terms import LoanTerms
from loan_ledger.scenarios import RepaymentScenario
from loan_ledger.sinks import ConsoleSink, JsonFileSink

logger = get_logger(__name__)

SCHEDULE_COLUMNS = [
    "installment_number",
    "due_date",
    "principal_due",
    "interest_due",
    "fees_due",
    "total_due",
]


def preview_terms(args: argparse.Namespace, config: LedgerConfig) -> None:
    """Print the quote and schedule for the terms given on the command line."""
    terms = LoanTerms(
        principal=args.principal,
        annual_rate=args.rate,
        term_days=args.days,
        interest_type=args.interest_type,
        payment_frequency=args.frequency,
        processing_fee_percent=args.processing_fee,
        platform_fee_per_period=args.platform_fee,
    )
    quote = TermsCalculator(config).quote(terms)
    schedule = ScheduleGenerator(config).generate(
        terms, args.start or date.today(), schedule_type=args.schedule
    )

    sink = ConsoleSink(pretty=True)
    sink.write_batch("quote", [quote])
    if args.json:
        sink.write_batch("installments", schedule)
        return

    rows = [
        {column: getattr(inst, column) for column in SCHEDULE_COLUMNS} for inst in schedule
    ]
    sink.write_table("Repayment schedule", rows, SCHEDULE_COLUMNS)


def run_scenario(args: argparse.Namespace, config: LedgerConfig) -> None:
    """Generate a seeded loan book, replay payments and export it."""
    scenario = RepaymentScenario(
        config=ScenarioConfig(name="preview", num_loans=args.scenario, seed=args.seed),
        ledger_config=config,
    )
    scenario.generate()

    sinks = [JsonFileSink(args.output, pretty=True)] if args.output else [
        ConsoleSink(pretty=True, max_records=3)
    ]
    scenario.export(sinks)
    for sink in sinks:
        sink.close()

    for key, value in scenario.get_summary().items():
        logger.info("%s: %s", key, value)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Preview loan quotes and repayment schedules")
    parser.add_argument("--principal", type=str, default="10000", help="Amount borrowed")
    parser.add_argument("--rate", type=str, default="18", help="Annual rate in percent")
    parser.add_argument("--days", type=int, default=365, help="Term length in days")
    parser.add_argument(
        "--interest-type",
        type=str,
        default="reducing",
        help="flat, reducing or compound (default: reducing)",
    )
    parser.add_argument(
        "--frequency",
        type=str,
        default="monthly",
        help="daily, weekly, bi-weekly, monthly or quarterly (default: monthly)",
    )
    parser.add_argument(
        "--schedule", type=str, default="fixed", help="fixed or flexible (default: fixed)"
    )
    parser.add_argument("--processing-fee", type=str, default="0", help="Processing fee percent")
    parser.add_argument("--platform-fee", type=str, default="0", help="Platform fee per period")
    parser.add_argument(
        "--start", type=date.fromisoformat, default=None, help="Disbursement date (YYYY-MM-DD)"
    )
    parser.add_argument("--json", action="store_true", help="Print the schedule as JSON")
    parser.add_argument(
        "--scenario",
        type=int,
        default=None,
        metavar="N",
        help="Generate and replay a book of N loans instead of one preview",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed for --scenario")
    parser.add_argument("--output", type=str, default=None, help="Directory for JSON export")
    parser.add_argument("--log-format", choices=("standard", "json"), default="standard")

    args = parser.parse_args()
    config = LedgerConfig.from_env()
    setup_logging(config.log_level, args.log_format)

    try:
        if args.scenario is not None:
            run_scenario(args, config)
        else:
            preview_terms(args, config)
    except LedgerError as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
