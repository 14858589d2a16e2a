import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from payments_engine import PaymentsEngine


def write_rows(tmp_path, name, rows):
    csv_file = tmp_path / name
    csv_file.write_text('\n'.join(["type, client, tx, amount"] + rows))
    return str(csv_file)


class TestPaymentsEngineLargeScale:
    def test_many_tiny_amounts_sum_exactly(self, tmp_path):
        """200 clients, 50 deposits and 10 withdrawals each, all in 0.0001 steps."""
        num_clients = 200
        rows = []
        tx_id = 1

        # Round-robin over clients so their transactions interleave in the file
        for step in range(50):
            for client_id in range(1, num_clients + 1):
                rows.append(f"deposit, {client_id}, {tx_id}, 0.0001")
                tx_id += 1
                if step % 5 == 4:
                    rows.append(f"withdrawal, {client_id}, {tx_id}, 0.0003")
                    tx_id += 1

        engine = PaymentsEngine()
        accounts = engine.process_file(write_rows(tmp_path, "tiny.csv", rows))

        assert len(accounts) == num_clients
        assert engine.stats.processed == num_clients * 60
        assert engine.stats.ignored == 0

        # 50 * 0.0001 - 10 * 0.0003
        for client_id, account in accounts.items():
            assert account.available == Decimal("0.0020"), f"Client {client_id}"
            assert account.held == Decimal("0")
            assert account.locked is False

    def test_interleaved_dispute_lifecycles(self, tmp_path):
        """
        300 clients each deposit 1.5 and 2.25 and withdraw 3.0 (available 0.75).
        Client id modulo 3 picks what happens next:
            0: dispute, resolve, duplicate resolve, re-dispute of the first deposit
            1: dispute and chargeback of the second deposit, then a new deposit
            2: only references that must be ignored
        """
        clients = range(1, 301)
        rows = []

        for client_id in clients:
            rows.append(f"deposit, {client_id}, {client_id * 10 + 1}, 1.5")
        for client_id in clients:
            rows.append(f"deposit, {client_id}, {client_id * 10 + 2}, 2.25")
        for client_id in clients:
            rows.append(f"withdrawal, {client_id}, {client_id * 10 + 3}, 3.0")

        for client_id in clients:
            first, second, withdrawn = client_id * 10 + 1, client_id * 10 + 2, client_id * 10 + 3
            if client_id % 3 == 0:
                rows.append(f"dispute, {client_id}, {first},")
            elif client_id % 3 == 1:
                rows.append(f"dispute, {client_id}, {second},")
            else:
                rows.append(f"dispute, {client_id}, {withdrawn},")
                rows.append(f"chargeback, {client_id}, {first},")
                rows.append(f"dispute, {client_id}, {client_id * 10 + 9},")

        for client_id in clients:
            first, second = client_id * 10 + 1, client_id * 10 + 2
            if client_id % 3 == 0:
                rows.append(f"resolve, {client_id}, {first},")
                rows.append(f"resolve, {client_id}, {first},")
                rows.append(f"dispute, {client_id}, {first},")
            elif client_id % 3 == 1:
                rows.append(f"chargeback, {client_id}, {second},")
                rows.append(f"deposit, {client_id}, {client_id * 10 + 4}, 2")

        engine = PaymentsEngine()
        accounts = engine.process_file(write_rows(tmp_path, "lifecycles.csv", rows))

        assert len(accounts) == 300
        # 3 per client, plus 2 for each resolved and 3 for each charged back client
        assert engine.stats.processed == 300 * 3 + 100 * 2 + 100 * 3
        assert engine.stats.ignored == 100 * 2 + 100 * 3

        for client_id in clients:
            account = accounts[client_id]
            if client_id % 3 == 1:
                # -1.5 after the chargeback, plus the later deposit of 2
                assert account.available == Decimal("0.5"), f"Client {client_id}"
                assert account.held == Decimal("0")
                assert account.total == Decimal("0.5")
                assert account.locked is True
            else:
                assert account.available == Decimal("0.75"), f"Client {client_id}"
                assert account.held == Decimal("0")
                assert account.locked is False
            assert account.disputed == {}

    def test_negative_available_across_many_clients(self, tmp_path):
        """Withdraw everything, then dispute: available goes negative, total is kept."""
        rows = []
        for client_id in range(1, 101):
            rows.append(f"deposit, {client_id}, {client_id * 10 + 1}, 0.0001")
            rows.append(f"withdrawal, {client_id}, {client_id * 10 + 2}, 0.0001")
            rows.append(f"dispute, {client_id}, {client_id * 10 + 1},")
        for client_id in range(1, 101, 2):
            rows.append(f"chargeback, {client_id}, {client_id * 10 + 1},")

        accounts = PaymentsEngine().process_file(write_rows(tmp_path, "negative.csv", rows))

        for client_id, account in accounts.items():
            assert account.available == Decimal("-0.0001"), f"Client {client_id}"
            if client_id % 2 == 1:
                assert account.held == Decimal("0")
                assert account.total == Decimal("-0.0001")
                assert account.locked is True
            else:
                assert account.held == Decimal("0.0001")
                assert account.total == Decimal("0")
                assert account.locked is False
