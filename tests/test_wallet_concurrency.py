import threading

import pytest
from sqlmodel import SQLModel, Session, create_engine, select

import models.models  # noqa: F401  (registers tables)
from models.models import Wallet
from schemas.wallet_schema import BillingInfoCreate
from scripts.seed import seed_project
from services.gateways import GatewayRegistry
from services.store import SqlStore
from services.wallet_service import WalletService
from tests.fakes import CountingGateway

THREADS = 12


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'wallets.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


def make_service(session):
    gateway = CountingGateway()
    return WalletService(
        SqlStore(session), GatewayRegistry({"FAKE": gateway, "STRIPE": gateway}), "github"
    )


def test_overlapping_activations_leave_one_active_wallet(file_engine):
    with Session(file_engine) as session:
        project = seed_project(session, "mihai/test", "github")
        project_id = project.id
        make_service(session).create_wallet("mihai", "test", "STRIPE", BillingInfoCreate())

    barrier = threading.Barrier(THREADS)
    errors = []

    def activate(wallet_type):
        try:
            with Session(file_engine) as session:
                service = make_service(session)
                barrier.wait()
                service.activate("mihai", "test", wallet_type)
        except Exception as e:  # noqa: BLE001  (collected and asserted below)
            errors.append(e)

    threads = [
        threading.Thread(target=activate, args=("FAKE" if i % 2 else "STRIPE",))
        for i in range(THREADS)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    with Session(file_engine) as session:
        active = session.exec(
            select(Wallet).where(Wallet.project_id == project_id, Wallet.active == True)  # noqa: E712
        ).all()
    assert len(active) == 1
