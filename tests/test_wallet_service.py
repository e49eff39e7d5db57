import itertools
from decimal import Decimal

import pytest

from core.exceptions import BadRequest, WalletAlreadyExists, WalletOperationFailed
from models.models import WalletType
from schemas.wallet_schema import BillingInfoCreate
from services.gateways import GatewayRegistry
from services.wallet_service import WalletService
from tests.fakes import CountingGateway, ExplodingStore


def make_service(store):
    gateway = CountingGateway()
    return WalletService(
        store,
        GatewayRegistry({WalletType.FAKE.value: gateway, WalletType.STRIPE.value: gateway}),
        "github",
    )


@pytest.fixture
def service(memory_store):
    return make_service(memory_store)


@pytest.fixture
def project(memory_store):
    return memory_store.add_project("john/test")


def active_count(store, project):
    return sum(1 for w in store.wallets_of(project) if w.active)


def test_list_wallets(service, project):
    wallets = service.list_wallets("john", "test")
    assert [(w.type, w.active) for w in wallets] == [("FAKE", True)]
    assert service.list_wallets("john", "missing") == []


def test_create_wallet_starts_inactive(service, project):
    wallet = service.create_wallet("john", "test", "STRIPE", BillingInfoCreate(name="John"))

    assert wallet.type == "STRIPE"
    assert wallet.active is False
    assert wallet.billing_name == "John"
    # no Stripe gateway configured in this registry, so no customer id
    assert wallet.identifier is None


def test_create_wallet_failures(service, project):
    with pytest.raises(WalletAlreadyExists):
        service.create_wallet("john", "test", "FAKE", BillingInfoCreate())
    with pytest.raises(WalletOperationFailed):
        service.create_wallet("john", "missing", "STRIPE", BillingInfoCreate())
    with pytest.raises(WalletOperationFailed):
        service.create_wallet("john", "test", "PAYPAL", BillingInfoCreate())


def test_activate_switches_active_wallet(service, project, memory_store):
    service.create_wallet("john", "test", "stripe", BillingInfoCreate())

    activated = service.activate("john", "test", "STRIPE")

    assert activated.type == "STRIPE" and activated.active
    assert memory_store.active_wallet(project) is activated
    assert active_count(memory_store, project) == 1


def test_activate_failures(service, project):
    with pytest.raises(WalletOperationFailed):
        service.activate("john", "missing", "STRIPE")
    with pytest.raises(WalletOperationFailed):
        service.activate("john", "test", "STRIPE")


@pytest.mark.parametrize("steps", list(itertools.permutations(
    [("create", "STRIPE"), ("activate", "STRIPE"), ("activate", "FAKE"), ("create", "FAKE")]
)))
def test_at_most_one_active_wallet(memory_store, steps):
    store = memory_store
    project = store.add_project("john/test", wallet_type=None)
    service = make_service(store)
    for action, wallet_type in steps:
        try:
            if action == "create":
                service.create_wallet("john", "test", wallet_type, BillingInfoCreate())
            else:
                service.activate("john", "test", wallet_type)
        except BadRequest:
            pass
        assert active_count(store, project) <= 1


def test_update_cash_rounds_half_up(service, project, memory_store):
    wallet = service.create_wallet("john", "test", "STRIPE", BillingInfoCreate())
    wallet.debt = 50

    updated = service.update_cash("john", "test", "STRIPE", Decimal("10.504"))

    assert updated.cash == 1050
    assert updated.available == 1000


def test_update_cash_rejects_fake_wallet_before_lookup():
    service = make_service(ExplodingStore())
    with pytest.raises(WalletOperationFailed):
        service.update_cash("john", "test", "FAKE", Decimal("10.5"))
    with pytest.raises(WalletOperationFailed):
        service.update_cash("john", "test", "fake", Decimal("10.5"))


def test_update_cash_missing_project_or_wallet(service, project):
    with pytest.raises(WalletOperationFailed):
        service.update_cash("john", "missing", "STRIPE", Decimal("10.5"))
    with pytest.raises(WalletOperationFailed):
        service.update_cash("john", "test", "STRIPE", Decimal("10.5"))
