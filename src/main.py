import sys
import logging

from config import load_config
from csv_io import write_accounts
from errors import LedgerError
from payments_engine import PaymentsEngine


def configure_logging() -> None:
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format=config.log_format,
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    configure_logging()

    filepath = argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except LedgerError as e:
        print(f"error: cannot load transactions: {e}", file=sys.stderr)
        return 1

    try:
        write_accounts(accounts.values(), sys.stdout)
    except OSError as e:
        print(f"error: cannot print accounts: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
