import csv
from typing import Dict, TextIO

from models import ClientAccount, format_amount

REPORT_HEADER = ["client", "available", "held", "total", "locked"]


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per client, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
