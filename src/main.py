import sys
import logging
from typing import Dict, List, Optional, TextIO

from models import ClientAccount, LedgerError, EXACT_CONTEXT
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

USAGE = """\
Usage: payments-replay <transactions.csv>

Replays the transaction log and prints final account balances as CSV.
"""


def format_decimal(value) -> str:
    """Format decimal in fixed-point notation, removing trailing zeros."""
    normalized = value.normalize(EXACT_CONTEXT)
    return f"{normalized:f}"


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    stream.write("client,available,held,total,locked\n")
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        stream.write(
            f"{client_id},"
            f"{format_decimal(account.available)},"
            f"{format_decimal(account.held)},"
            f"{format_decimal(account.total)},"
            f"{str(account.locked).lower()}\n"
        )


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE, end="")
        return 0

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, LedgerError) as e:
        logger.debug("Replay aborted", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
