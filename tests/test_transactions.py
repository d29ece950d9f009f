import pytest

from Eduledger.errors import NotFoundError
from Eduledger.ledger import balances, invoices, transactions

from tests.helpers import (
    aggregate, assert_ledger_consistent, make_class, make_student, student_balance,
)


@pytest.fixture
def ledger_store(store):
    store.save(aggregate(students=[make_student("S001"), make_student("S002")]))
    return store


def test_credit_adjustment_is_a_payment(ledger_store):
    tx = transactions.add_adjustment(ledger_store, "S001", 250000, "CREDIT", "2024-05-10", "Cash")

    data = ledger_store.load()
    assert tx["type"] == "PAYMENT"
    assert tx["amount"] == 250000
    assert student_balance(data, "S001") == 250000
    assert_ledger_consistent(data)


def test_debit_adjustment_is_a_charge(ledger_store):
    tx = transactions.add_adjustment(ledger_store, "S001", 40000, "DEBIT", "2024-05-10", "Books")

    assert tx["type"] == "ADJUSTMENT_DEBIT"
    assert tx["amount"] == -40000
    assert student_balance(ledger_store.load(), "S001") == -40000


@pytest.mark.parametrize("amount", [0, -5])
def test_adjustment_amount_must_be_positive(ledger_store, amount):
    with pytest.raises(ValueError):
        transactions.add_adjustment(ledger_store, "S001", amount, "CREDIT", "2024-05-10", "")

    assert ledger_store.list("transactions") == []


def test_adjustment_for_unknown_student(ledger_store):
    with pytest.raises(NotFoundError):
        transactions.add_adjustment(ledger_store, "S404", 10, "DEBIT", "2024-05-10", "")

    assert ledger_store.list("transactions") == []


def test_update_moves_balance_by_the_difference(ledger_store):
    tx = transactions.add_adjustment(ledger_store, "S001", 100000, "CREDIT", "2024-05-10", "Cash")

    transactions.update_transaction(ledger_store, dict(tx, amount=150000))

    data = ledger_store.load()
    assert student_balance(data, "S001") == 150000
    assert_ledger_consistent(data)


def test_update_to_another_student_moves_the_amount(ledger_store):
    tx = transactions.add_adjustment(ledger_store, "S001", 100000, "CREDIT", "2024-05-10", "Cash")

    transactions.update_transaction(ledger_store, dict(tx, studentId="S002", amount=90000))

    data = ledger_store.load()
    assert student_balance(data, "S001") == 0
    assert student_balance(data, "S002") == 90000
    assert_ledger_consistent(data)


def test_update_unknown_transaction(ledger_store):
    with pytest.raises(NotFoundError):
        transactions.update_transaction(ledger_store, {"id": "TRX-x", "studentId": "S001", "amount": 1})


def test_delete_reverses_balance(ledger_store):
    tx = transactions.add_adjustment(ledger_store, "S001", 70000, "DEBIT", "2024-05-10", "")

    transactions.delete_transaction(ledger_store, tx["id"])

    data = ledger_store.load()
    assert data["transactions"] == []
    assert student_balance(data, "S001") == 0
    with pytest.raises(NotFoundError):
        transactions.delete_transaction(ledger_store, tx["id"])


def test_editing_invoice_transaction_leaves_invoice_alone(ledger_store):
    with ledger_store.mutate() as data:
        data["classes"].append(make_class("C1", fee_type="MONTHLY", amount=500000, student_ids=["S001"]))
    invoices.generate_invoices(ledger_store, 5, 2024)
    invoice_tx = ledger_store.list("transactions")[0]

    transactions.update_transaction(ledger_store, dict(invoice_tx, amount=-450000))

    data = ledger_store.load()
    assert data["invoices"][0]["amount"] == 500000
    assert student_balance(data, "S001") == -450000
    assert_ledger_consistent(data)


def test_clear_all_transactions(ledger_store):
    transactions.add_adjustment(ledger_store, "S001", 10, "CREDIT", "2024-05-10", "")
    transactions.add_adjustment(ledger_store, "S002", 20, "DEBIT", "2024-05-10", "")

    transactions.clear_all_transactions(ledger_store)

    data = ledger_store.load()
    assert data["transactions"] == [] and data["invoices"] == []
    assert [s["balance"] for s in data["students"]] == [0, 0]


def test_fetch_transactions_newest_first(ledger_store):
    transactions.add_adjustment(ledger_store, "S001", 10, "CREDIT", "2024-05-01", "")
    transactions.add_adjustment(ledger_store, "S001", 20, "CREDIT", "2024-05-20", "")
    transactions.add_adjustment(ledger_store, "S002", 30, "CREDIT", "2024-05-10", "")

    assert [t["amount"] for t in transactions.fetch_transactions(ledger_store, student_id="S001")] == [20, 10]


def test_reconcile_repairs_drift(store):
    store.save(aggregate(
        students=[make_student("S001", balance=5), make_student("S002")],
        transactions=[{"id": "TRX1", "studentId": "S001", "amount": -300, "type": "INVOICE", "date": "2024-05-31"}],
    ))

    drift = balances.reconcile_balances(store)

    assert drift == {"S001": (5, -300)}
    assert_ledger_consistent(store.load())
    assert balances.reconcile_balances(store) == {}
