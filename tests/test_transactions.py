from datetime import datetime, timedelta

import pytest

from models import MAX_AMOUNT, Transaction, utcnow
from app.errors import NotFound, ValidationError
from app.services import categories, transactions, wallets
from app.services.transactions import TransactionInput


def _income(wallet, category, amount=500000, **kwargs):
    return TransactionInput(
        amount=amount, type="income", wallet_id=wallet.id, category_id=category.id, **kwargs
    )


def _expense(wallet, category, amount=1000, **kwargs):
    return TransactionInput(
        amount=amount, type="expense", wallet_id=wallet.id, category_id=category.id, **kwargs
    )


class TestCreateTransaction:
    """Tests for the create pipeline."""

    def test_create_income(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(
            db, alice.id, _income(alice_cash, alice_salary, description="  November  ")
        )

        assert created.id is not None
        assert created.user_id == alice.id
        assert created.amount == 500000
        assert created.type == "income"
        assert created.wallet_name == "Cash"
        assert created.category_name == "Salary"
        assert created.description == "November"
        assert created.created_at is not None

    @pytest.mark.parametrize("amount", [0, -5, 10.5, "100", True, MAX_AMOUNT + 1, 2**63])
    def test_amount_must_be_positive_integer(self, db, alice, alice_cash, alice_salary, amount):
        with pytest.raises(ValidationError):
            transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary, amount=amount))

        assert db.query(Transaction).count() == 0

    def test_largest_amount_is_accepted(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(
            db, alice.id, _income(alice_cash, alice_salary, amount=MAX_AMOUNT)
        )

        assert created.amount == MAX_AMOUNT

    def test_unknown_type(self, db, alice, alice_cash, alice_salary):
        data = _income(alice_cash, alice_salary)
        data.type = "refund"

        with pytest.raises(ValidationError):
            transactions.create_transaction(db, alice.id, data)

    def test_foreign_wallet_is_not_found(self, db, alice, bob, alice_salary):
        bob_wallet = wallets.create_wallet(db, bob.id, name="Bob cash")

        with pytest.raises(NotFound):
            transactions.create_transaction(db, alice.id, _income(bob_wallet, alice_salary))

    def test_foreign_category_is_not_found(self, db, alice, bob, alice_cash):
        bob_salary = categories.create_category(db, bob.id, "Salary", "income")

        with pytest.raises(NotFound):
            transactions.create_transaction(db, alice.id, _income(alice_cash, bob_salary))

    def test_category_required_for_income_and_expense(self, db, alice, alice_cash):
        data = TransactionInput(amount=10, type="expense", wallet_id=alice_cash.id)

        with pytest.raises(ValidationError):
            transactions.create_transaction(db, alice.id, data)

    def test_category_kind_must_match_type(self, db, alice, alice_cash, alice_salary):
        """Test that an income category cannot tag an expense."""
        with pytest.raises(ValidationError):
            transactions.create_transaction(db, alice.id, _expense(alice_cash, alice_salary))

    def test_date_defaults_to_now(self, db, alice, alice_cash, alice_salary):
        before = utcnow() - timedelta(seconds=5)

        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))

        assert created.date >= before
        assert created.date <= utcnow() + timedelta(seconds=5)

    def test_date_is_parsed(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(
            db, alice.id, _income(alice_cash, alice_salary, date="2025-11-18")
        )

        assert created.date == datetime(2025, 11, 18)

    def test_invalid_date(self, db, alice, alice_cash, alice_salary):
        with pytest.raises(ValidationError):
            transactions.create_transaction(
                db, alice.id, _income(alice_cash, alice_salary, date="18/11/2025")
            )


class TestTransfers:
    """Tests for the transfer rules."""

    def test_transfer_between_own_wallets(self, db, alice, alice_cash, alice_bank):
        created = transactions.create_transaction(
            db,
            alice.id,
            TransactionInput(amount=200, type="transfer", wallet_id=alice_bank.id, to_wallet_id=alice_cash.id),
        )

        assert created.to_wallet_id == alice_cash.id
        assert created.to_wallet_name == "Cash"
        assert created.category_id is None

    def test_transfer_requires_destination(self, db, alice, alice_cash):
        with pytest.raises(ValidationError):
            transactions.create_transaction(
                db, alice.id, TransactionInput(amount=200, type="transfer", wallet_id=alice_cash.id)
            )

    def test_transfer_to_same_wallet(self, db, alice, alice_cash):
        with pytest.raises(ValidationError):
            transactions.create_transaction(
                db,
                alice.id,
                TransactionInput(amount=200, type="transfer", wallet_id=alice_cash.id, to_wallet_id=alice_cash.id),
            )

    def test_transfer_to_foreign_wallet(self, db, alice, bob, alice_cash):
        bob_wallet = wallets.create_wallet(db, bob.id, name="Bob cash")

        with pytest.raises(NotFound):
            transactions.create_transaction(
                db,
                alice.id,
                TransactionInput(amount=200, type="transfer", wallet_id=alice_cash.id, to_wallet_id=bob_wallet.id),
            )

    def test_transfer_cannot_have_category(self, db, alice, alice_cash, alice_bank, alice_food):
        with pytest.raises(ValidationError):
            transactions.create_transaction(
                db,
                alice.id,
                TransactionInput(
                    amount=200,
                    type="transfer",
                    wallet_id=alice_cash.id,
                    to_wallet_id=alice_bank.id,
                    category_id=alice_food.id,
                ),
            )

    def test_destination_only_for_transfers(self, db, alice, alice_cash, alice_bank, alice_food):
        with pytest.raises(ValidationError):
            transactions.create_transaction(
                db, alice.id, _expense(alice_cash, alice_food, to_wallet_id=alice_bank.id)
            )


class TestListAndGet:
    """Tests for reading the journal."""

    def test_list_is_most_recent_first(self, db, alice, alice_cash, alice_salary, alice_food):
        transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary, date="2025-01-10"))
        transactions.create_transaction(db, alice.id, _expense(alice_cash, alice_food, date="2025-03-01"))
        transactions.create_transaction(db, alice.id, _expense(alice_cash, alice_food, date="2025-02-01"))

        dates = [t.date.date().isoformat() for t in transactions.list_transactions(db, alice.id)]

        assert dates == ["2025-03-01", "2025-02-01", "2025-01-10"]

    def test_list_is_enriched_with_names(self, db, alice, alice_cash, alice_bank, alice_food):
        transactions.create_transaction(db, alice.id, _expense(alice_cash, alice_food))
        transactions.create_transaction(
            db,
            alice.id,
            TransactionInput(amount=5, type="transfer", wallet_id=alice_bank.id, to_wallet_id=alice_cash.id),
        )

        views = {t.type: t for t in transactions.list_transactions(db, alice.id)}

        assert views["expense"].wallet_name == "Cash"
        assert views["expense"].category_name == "Food"
        assert views["transfer"].wallet_name == "BCA"
        assert views["transfer"].to_wallet_name == "Cash"
        assert views["transfer"].category_name is None

    def test_list_only_own(self, db, alice, bob, alice_cash, alice_salary):
        transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))

        assert transactions.list_transactions(db, bob.id) == []

    def test_list_filters(self, db, alice, alice_cash, alice_bank, alice_salary, alice_food):
        transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary, date="2025-01-10"))
        transactions.create_transaction(db, alice.id, _expense(alice_bank, alice_food, date="2025-02-03"))
        transactions.create_transaction(
            db,
            alice.id,
            TransactionInput(
                amount=5, type="transfer", wallet_id=alice_bank.id, to_wallet_id=alice_cash.id, date="2025-02-20"
            ),
        )

        february = transactions.list_transactions(db, alice.id, month="2025-02")
        expenses = transactions.list_transactions(db, alice.id, tx_type="expense")
        cash = transactions.list_transactions(db, alice.id, wallet_id=alice_cash.id)

        assert len(february) == 2
        assert [t.type for t in expenses] == ["expense"]
        assert sorted(t.type for t in cash) == ["income", "transfer"]

    def test_list_rejects_bad_month(self, db, alice):
        with pytest.raises(ValidationError):
            transactions.list_transactions(db, alice.id, month="2025-13")

    def test_get_own(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))

        found = transactions.get_transaction(db, alice.id, created.id)

        assert found.id == created.id
        assert found.category_name == "Salary"

    def test_get_foreign_is_not_found(self, db, alice, bob, alice_cash, alice_salary):
        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))

        with pytest.raises(NotFound):
            transactions.get_transaction(db, bob.id, created.id)


class TestUpdateTransaction:
    """Tests for full-replace edits."""

    def test_update_replaces_fields_and_keeps_created_at(
        self, db, alice, alice_cash, alice_bank, alice_salary, alice_food
    ):
        created = transactions.create_transaction(
            db, alice.id, _income(alice_cash, alice_salary, date="2025-01-10")
        )

        updated = transactions.update_transaction(
            db, alice.id, created.id, _expense(alice_bank, alice_food, amount=42, date="2025-02-01")
        )

        assert updated.id == created.id
        assert updated.type == "expense"
        assert updated.amount == 42
        assert updated.wallet_id == alice_bank.id
        assert updated.category_id == alice_food.id
        assert updated.date == datetime(2025, 2, 1)
        assert updated.created_at == created.created_at

    def test_update_without_date_keeps_existing_date(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(
            db, alice.id, _income(alice_cash, alice_salary, date="2025-01-10")
        )

        updated = transactions.update_transaction(
            db, alice.id, created.id, _income(alice_cash, alice_salary, amount=1)
        )

        assert updated.date == datetime(2025, 1, 10)

    def test_update_revalidates_input(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))

        with pytest.raises(ValidationError):
            transactions.update_transaction(
                db, alice.id, created.id, _income(alice_cash, alice_salary, amount=0)
            )

    def test_update_missing_target_is_not_found_even_with_bad_input(self, db, alice, alice_cash, alice_salary):
        with pytest.raises(NotFound):
            transactions.update_transaction(
                db, alice.id, 9999, _income(alice_cash, alice_salary, amount=-1)
            )

    def test_update_foreign_target_is_not_found(self, db, alice, bob, alice_cash, alice_salary):
        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))
        bob_wallet = wallets.create_wallet(db, bob.id, name="Bob cash")
        bob_salary = categories.create_category(db, bob.id, "Salary", "income")

        with pytest.raises(NotFound):
            transactions.update_transaction(db, bob.id, created.id, _income(bob_wallet, bob_salary))

        assert transactions.get_transaction(db, alice.id, created.id).wallet_id == alice_cash.id


class TestDeleteTransaction:
    """Tests for deletes."""

    def test_delete_own(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))

        transactions.delete_transaction(db, alice.id, created.id)

        assert db.query(Transaction).count() == 0

    def test_delete_twice_is_not_found_both_times(self, db, alice, alice_cash, alice_salary):
        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))
        transactions.delete_transaction(db, alice.id, created.id)

        for _ in range(2):
            with pytest.raises(NotFound):
                transactions.delete_transaction(db, alice.id, created.id)

    def test_delete_foreign_is_not_found_and_row_survives(self, db, alice, bob, alice_cash, alice_salary):
        created = transactions.create_transaction(db, alice.id, _income(alice_cash, alice_salary))

        with pytest.raises(NotFound):
            transactions.delete_transaction(db, bob.id, created.id)

        assert db.query(Transaction).filter(Transaction.id == created.id).count() == 1
