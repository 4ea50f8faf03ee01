import sys
import logging

from csv_reader import TransactionParseError, read_transactions_file
from report import write_report
from transaction_engine import TransactionEngine

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if len(argv) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[0]
    engine = TransactionEngine()
    try:
        engine.process_all(read_transactions_file(filepath))
    except (OSError, TransactionParseError) as e:
        logger.error(f"Failed to read {filepath}: {e}")
        return 1

    write_report(engine.accounts(), sys.stdout)
    print(f"Applied: {engine.stats.applied}, Ignored: {engine.stats.ignored}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
