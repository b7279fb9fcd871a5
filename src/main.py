import argparse
import logging
import os
import sys
from typing import List, Optional

from csv_io import write_accounts
from errors import PaymentsEngineError
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "WARNING"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payments-engine",
        description="A simple toy payments engine",
        epilog="Results are printed to stdout in CSV format, e.g. payments-engine transactions.csv > accounts.csv",
    )
    parser.add_argument("input_file", metavar="FILE", help="Input CSV file with columns: type, client, tx, amount")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("PAYMENTS_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level for stderr (default: $PAYMENTS_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=os.environ.get("PAYMENTS_STRICT") == "1",
        help="Verify account invariants after every applied transaction",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(strict=args.strict)
    try:
        accounts = engine.process_file(args.input_file)
    except OSError as e:
        print(f"Failed to open input file: {e}", file=sys.stderr)
        return 1
    except PaymentsEngineError as e:
        print(f"Failed to process transactions: {e}", file=sys.stderr)
        return 1

    logger.info(f"Exporting {len(accounts)} accounts")
    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
