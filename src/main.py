import sys
import logging
from typing import List, Optional

from csv_io import write_accounts
from errors import LedgerInvariantError, TransactionParseError
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_LEDGER_CORRUPTED = 2


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-ledger <transactions.csv>", file=sys.stderr)
        return EXIT_INPUT_ERROR

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except FileNotFoundError:
        logger.error(f'csv file: "{filepath}" does not exist')
        return EXIT_INPUT_ERROR
    except OSError as e:
        logger.error(f'csv file: "{filepath}" could not be read: {e}')
        return EXIT_INPUT_ERROR
    except (TransactionParseError, UnicodeDecodeError) as e:
        logger.error(f"failed to parse transactions from csv file: {e}")
        return EXIT_INPUT_ERROR
    except LedgerInvariantError as e:
        logger.error(f"fatal error while processing transactions: {e}")
        return EXIT_LEDGER_CORRUPTED

    stats = engine.stats
    report = f"Processed: {stats.processed}, Failed: {stats.failed}"
    if stats.failures_by_kind:
        breakdown = ", ".join(f"{kind}: {count}" for kind, count in sorted(stats.failures_by_kind.items()))
        report += f" ({breakdown})"
    print(report, file=sys.stderr)

    write_accounts(accounts, sys.stdout)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
