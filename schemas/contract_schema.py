# contract_schema.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from decimal import Decimal

from core.money import Money
from models.models import Contract, ContractRole
from schemas.money_format import format_currency


class ContractCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    hourly_rate: Decimal = Field(..., gt=0, max_digits=12)
    role: ContractRole

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContractIdRead(BaseModel):
    repo_full_name: str
    contributor_username: str
    provider: str
    role: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContractRead(BaseModel):
    id: ContractIdRead
    hourly_rate: str
    value: str
    revenue: str
    marked_for_removal: Optional[datetime]
    # Only sent when the caller asks for it
    project_wallet_type: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_contract(cls, contract: Contract, wallet_type: Optional[str] = None,
                      with_wallet_type: bool = False) -> "ContractRead":
        fields = dict(
            id=ContractIdRead(
                repo_full_name=contract.repo_full_name,
                contributor_username=contract.contributor_username,
                provider=contract.provider,
                role=contract.role,
            ),
            hourly_rate=format_currency(Money(contract.hourly_rate)),
            value=format_currency(Money(contract.value)),
            revenue=format_currency(Money(contract.revenue)),
            marked_for_removal=contract.marked_for_removal,
        )
        if with_wallet_type:
            fields["project_wallet_type"] = wallet_type
        return cls(**fields)
