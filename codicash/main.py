import logging
import sys

from codicash import config
from codicash.cli import CodiCashCLI
from codicash.storage import load_expenses


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    expenses = []
    if argv:
        try:
            expenses = load_expenses(argv[0])
        except (FileNotFoundError, ValueError) as e:
            print(e)
            return 1

    CodiCashCLI(expenses).cmdloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
