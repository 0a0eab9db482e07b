"""Typed input objects passed from the API layer to the services."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class CreateSellerData:
    name: str
    email: str

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=(data.get('name') or '').strip(),
            email=(data.get('email') or '').strip().lower(),
        )


@dataclass(frozen=True)
class CreateSaleData:
    seller_id: int
    amount: Decimal
    sold_at: datetime

    @classmethod
    def from_dict(cls, data):
        return cls(
            seller_id=int(data['seller_id']),
            amount=Decimal(str(data['amount'])),
            sold_at=data['sold_at'],
        )


@dataclass(frozen=True)
class LoginData:
    email: str
    password: str

    @classmethod
    def from_dict(cls, data):
        return cls(
            email=(data.get('email') or '').strip().lower(),
            password=data.get('password') or '',
        )
