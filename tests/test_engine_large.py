import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from payments_engine import PaymentsEngine


class TestPaymentsEngineLargeScale:
    def test_1000_accounts_interleaved(self, tmp_path):
        """1000 clients, deposits and withdrawals interleaved across clients."""
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Each round touches every client once, so client histories interleave.
        # Per client: 100 + 200 + 300 - 50 - 100 + 50 = 500, and one overdraft ignored
        for amount in ["100", "200", "300"]:
            for client_id in range(1, num_clients + 1):
                rows.append(f"deposit, {client_id}, {tx_id}, {amount}")
                tx_id += 1
        for amount in ["50", "100", "1000"]:
            for client_id in range(1, num_clients + 1):
                rows.append(f"withdrawal, {client_id}, {tx_id}, {amount}")
                tx_id += 1
        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients
        for client_id in range(1, num_clients + 1):
            assert accounts[client_id].available == Decimal("500"), \
                f"Client {client_id}: expected 500, got {accounts[client_id].available}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        assert engine.stats.applied == num_clients * 6
        assert engine.stats.ignored == num_clients

    def test_dispute_lifecycles_across_clients(self, tmp_path):
        rows = ["type, client, tx, amount"]

        def deposits(client_ids, amounts):
            for client_id in client_ids:
                for offset, amount in enumerate(amounts, start=1):
                    rows.append(f"deposit, {client_id}, {client_id * 100 + offset}, {amount}")

        def events(kind, client_ids, offset):
            for client_id in client_ids:
                rows.append(f"{kind}, {client_id}, {client_id * 100 + offset},")

        plain = range(1, 11)
        resolved = range(11, 21)
        charged_back = range(21, 31)
        held = range(31, 41)
        unknown = range(41, 51)

        deposits(plain, ["100", "150", "250"])

        deposits(resolved, ["100", "150", "250"])
        events("dispute", resolved, 2)
        events("resolve", resolved, 2)

        deposits(charged_back, ["100", "150", "250"])
        events("dispute", charged_back, 1)
        events("chargeback", charged_back, 1)
        # locked accounts ignore everything that follows
        for client_id in charged_back:
            rows.append(f"deposit, {client_id}, {client_id * 100 + 9}, 1000")
        events("dispute", charged_back, 3)

        for client_id in held:
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 250")
            rows.append(f"withdrawal, {client_id}, {client_id * 100 + 3}, 100")
        events("dispute", held, 1)

        deposits(unknown, ["500"])
        events("dispute", unknown, 7)
        events("chargeback", unknown, 7)

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        accounts = PaymentsEngine().process_file(str(csv_file))

        for client_id in plain:
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        for client_id in resolved:
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        for client_id in charged_back:
            assert accounts[client_id].available == Decimal("400"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].total == Decimal("400")
            assert accounts[client_id].locked is True

        for client_id in held:
            assert accounts[client_id].available == Decimal("150"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("150")
            assert accounts[client_id].total == Decimal("300")
            assert accounts[client_id].locked is False

        for client_id in unknown:
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False
