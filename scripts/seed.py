# scripts/seed.py

import os
import sys
import argparse

from sqlmodel import Session, select

# Ensure root path for relative imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import settings
from core.database import engine, create_db_and_tables
from models.models import Contract, ContractRole, Invoice, Project, Wallet, WalletType


def seed_project(session: Session, repo_full_name: str, provider: str, manager: str = "zoeself") -> Project:
    """Create the project with its active FAKE wallet if it is not there yet."""
    project = session.exec(
        select(Project).where(
            Project.repo_full_name == repo_full_name,
            Project.provider == provider,
        )
    ).first()

    if not project:
        project = Project(
            repo_full_name=repo_full_name,
            provider=provider,
            owner=repo_full_name.split("/")[0],
            project_manager=manager,
        )
        session.add(project)
        session.commit()
        session.refresh(project)
        session.add(Wallet(project_id=project.id, type=WalletType.FAKE.value, active=True))
        session.commit()
        print(f"✅ Created project {repo_full_name} with an active FAKE wallet")
    return project


def seed_dev_data(repo_full_name: str):
    """Seed development database with a demo project, contract and invoice."""
    print("🌱 Seeding development data...")
    create_db_and_tables()

    with Session(engine) as session:
        project = seed_project(session, repo_full_name, settings.PROVIDER)

        contract = session.exec(
            select(Contract).where(
                Contract.project_id == project.id,
                Contract.contributor_username == "john",
                Contract.role == ContractRole.DEV.value,
            )
        ).first()

        if not contract:
            contract = Contract(
                project_id=project.id,
                repo_full_name=project.repo_full_name,
                contributor_username="john",
                provider=project.provider,
                role=ContractRole.DEV.value,
                hourly_rate=2500,
                value=10000,
                revenue=650,
            )
            session.add(contract)
            session.commit()
            session.refresh(contract)
            session.add(Invoice(contract_id=contract.id, amount=10000, fees=650))
            session.commit()
            print("✅ Added contract for john (DEV) with one open invoice")

    print("🌱 Development data seeding complete.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the FinanceOps database.")
    parser.add_argument(
        "--repo",
        default="mihai/test",
        help="Full name (owner/repo) of the demo project",
    )
    args = parser.parse_args()
    seed_dev_data(args.repo)
