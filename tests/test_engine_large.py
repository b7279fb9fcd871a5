import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from payments_engine import PaymentsEngine


class TestPaymentsEngineLargeScale:
    def test_1000_accounts_6000_transactions(self, tmp_path):
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Per client: 100 + 200 + 300 - 50 - 100, then +50 = 500
        for client_id in range(1, num_clients + 1):
            for kind, amount in [("deposit", "100"), ("deposit", "200"), ("deposit", "300"),
                                 ("withdrawal", "50"), ("withdrawal", "100")]:
                rows.append(f"{kind}, {client_id}, {tx_id}, {amount}")
                tx_id += 1

        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine(strict=True)
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients
        assert engine.stats.processed == 6000
        assert engine.stats.skipped == 0

        for client_id, account in accounts.items():
            assert account.available == Decimal("500"), f"Client {client_id}"
            assert account.held == Decimal("0")
            assert account.locked is False

    def test_with_disputes_resolves_chargebacks(self, tmp_path):
        """Five cohorts of ten clients, each driven through a different dispute path."""
        rows = ["type, client, tx, amount"]

        def tx(client_id, n):
            return client_id * 100 + n

        for client_id in range(1, 51):
            rows.append(f"deposit, {client_id}, {tx(client_id, 1)}, 100")
            rows.append(f"deposit, {client_id}, {tx(client_id, 2)}, 150")
            rows.append(f"deposit, {client_id}, {tx(client_id, 3)}, 250")

        # 11-20: dispute then resolve
        rows += [f"dispute, {c}, {tx(c, 1)}," for c in range(11, 21)]
        rows += [f"resolve, {c}, {tx(c, 1)}," for c in range(11, 21)]

        # 21-30: dispute then chargeback, later deposits rejected
        rows += [f"dispute, {c}, {tx(c, 1)}," for c in range(21, 31)]
        rows += [f"chargeback, {c}, {tx(c, 1)}," for c in range(21, 31)]
        rows += [f"deposit, {c}, {tx(c, 9)}, 1000" for c in range(21, 31)]

        # 31-40: withdraw most of the balance, then dispute the largest deposit
        rows += [f"withdrawal, {c}, {tx(c, 4)}, 450" for c in range(31, 41)]
        rows += [f"dispute, {c}, {tx(c, 3)}," for c in range(31, 41)]

        # 41-50: another client tries to dispute their deposits
        rows += [f"dispute, {c - 40}, {tx(c, 2)}," for c in range(41, 51)]

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine(strict=True)
        accounts = engine.process_file(str(csv_file))

        for client_id, account in accounts.items():
            assert account.total == account.available + account.held, f"Client {client_id}"

        for client_id in range(1, 21):
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        for client_id in range(21, 31):
            assert accounts[client_id].available == Decimal("400"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].total == Decimal("400")
            assert accounts[client_id].locked is True

        for client_id in range(31, 41):
            assert accounts[client_id].available == Decimal("-200"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("250")
            assert accounts[client_id].total == Decimal("50")
            assert accounts[client_id].locked is False

        for client_id in range(41, 51):
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")

        # 10 locked deposits + 10 client mismatches
        assert engine.stats.skipped == 20
