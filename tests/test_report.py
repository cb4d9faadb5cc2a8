import sys
import os
import io

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import ClientAccount
from report import write_accounts


def render(accounts) -> str:
    stream = io.StringIO()
    write_accounts(accounts, stream)
    return stream.getvalue()


class TestWriteAccounts:
    def test_header_only_when_empty(self):
        assert render({}) == "client,available,held,total,locked\n"

    def test_rows_sorted_with_four_decimals(self):
        accounts = {
            2: ClientAccount(client_id=2, available=20000),
            1: ClientAccount(client_id=1, available=15000, held=5000),
            0: ClientAccount(client_id=0, locked=True),
        }
        assert render(accounts) == (
            "client,available,held,total,locked\n"
            "0,0.0000,0.0000,0.0000,true\n"
            "1,1.5000,0.5000,2.0000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        )

    def test_total_is_sum(self):
        accounts = {7: ClientAccount(client_id=7, available=22099, held=1)}
        assert render(accounts).splitlines()[1] == "7,2.2099,0.0001,2.2100,false"
