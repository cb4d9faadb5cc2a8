import sys
import logging
from typing import List, Optional

from payments_engine import PaymentsEngine
from report import write_accounts

EXIT_USAGE = 1
EXIT_INPUT_UNREADABLE = 2


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: toy-payments <input.csv>", file=sys.stderr)
        return EXIT_USAGE

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        print(f"Error: cannot read {filepath}: {e}", file=sys.stderr)
        return EXIT_INPUT_UNREADABLE

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
