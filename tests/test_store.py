import pytest

from core.exceptions import WalletAlreadyExists
from core.money import Money
from models.models import Payment, PaymentStatus, Wallet, utcnow


def test_get_project(store, project):
    assert store.get_project("mihai/test", "github").id == project.id
    assert store.get_project("mihai/test", "gitlab") is None


def test_add_contract_opens_first_invoice(store, contract):
    invoices = store.invoices_of(contract)
    assert len(invoices) == 1
    assert not invoices[0].is_paid
    assert store.active_invoice(contract).id == invoices[0].id


def test_duplicate_contract_is_rejected(store, project, contract):
    from services.store import ContractRejected

    with pytest.raises(ContractRejected):
        store.add_contract(project, "john", Money(2000), "DEV")
    # the session is still usable after the rollback
    assert [c.id for c in store.contracts_of(project)] == [contract.id]


def test_mark_and_restore(store, project, contract):
    store.mark_contract_for_removal(contract)
    assert store.find_contract(project, contract.contract_id).is_marked

    store.restore_contract(contract)
    assert not store.find_contract(project, contract.contract_id).is_marked


def test_successful_payment_is_registered(store, project, contract):
    invoice = store.active_invoice(contract)
    invoice.amount, invoice.fees = 1000, 65
    wallet = store.active_wallet(project)

    payment = store.register_payment(
        invoice, wallet,
        Payment(invoice_id=0, wallet_type="", status=PaymentStatus.SUCCESSFUL.value,
                transaction_id="tx_1", payment_time=utcnow()),
    )

    assert payment.id is not None
    assert payment.value == 1065
    assert payment.wallet_type == "FAKE"
    assert invoice.is_paid and invoice.latest.id == payment.id
    assert wallet.debt == 1065
    next_invoice = store.active_invoice(contract)
    assert next_invoice.id != invoice.id and not next_invoice.is_paid


def test_failed_payment_keeps_invoice_open(store, project, contract):
    invoice = store.active_invoice(contract)
    wallet = store.active_wallet(project)

    store.register_payment(
        invoice, wallet,
        Payment(invoice_id=0, wallet_type="", status=PaymentStatus.FAILED.value,
                fail_reason="declined", payment_time=utcnow()),
    )

    assert not invoice.is_paid
    assert invoice.latest.fail_reason == "declined"
    assert store.active_invoice(contract).id == invoice.id
    assert wallet.debt == 0


def test_wallet_lifecycle(store, project):
    stripe_wallet = store.create_wallet(project, Wallet(project_id=project.id, type="STRIPE", active=True))
    assert stripe_wallet.active is False

    with pytest.raises(WalletAlreadyExists):
        store.create_wallet(project, Wallet(project_id=project.id, type="STRIPE"))

    store.activate_wallet(project, stripe_wallet)
    assert [(w.type, w.active) for w in store.wallets_of(project)] == [("FAKE", False), ("STRIPE", True)]
    assert store.active_wallet(project).id == stripe_wallet.id

    store.update_cash(stripe_wallet, Money(1050))
    assert stripe_wallet.cash == 1050 and stripe_wallet.available == 1050


def test_only_one_active_payment_method(store, project):
    wallet = store.create_wallet(project, Wallet(project_id=project.id, type="STRIPE"))

    store.add_payment_method(wallet, "pm_1", active=True)
    store.add_payment_method(wallet, "pm_2", active=True)

    assert [(m.identifier, m.active) for m in wallet.payment_methods] == [("pm_1", False), ("pm_2", True)]
    assert wallet.active_payment_method.identifier == "pm_2"


def test_timestamps_are_timezone_aware(store, project, contract):
    invoice = store.active_invoice(contract)
    payment = Payment(invoice_id=0, wallet_type="", status=PaymentStatus.SUCCESSFUL.value)
    assert payment.payment_time.tzinfo is not None
    assert utcnow().utcoffset().total_seconds() == 0

    # every timestamp column is written once: created_at, paid_at,
    # payment_time and marked_for_removal
    store.register_payment(invoice, store.active_wallet(project), payment)
    store.mark_contract_for_removal(contract)
    store.add_payment_method(
        store.create_wallet(project, Wallet(project_id=project.id, type="STRIPE")), "pm_1", active=True
    )

    assert invoice.paid_at is not None
    assert contract.is_marked
