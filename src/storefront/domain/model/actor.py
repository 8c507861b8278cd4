"""The authenticated caller of an operation.

Identity is resolved by the external auth layer; the core trusts it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    customer_id: str | None
    role: Role

    @staticmethod
    def customer(customer_id: str) -> Actor:
        return Actor(customer_id=customer_id, role=Role.CUSTOMER)

    @staticmethod
    def admin() -> Actor:
        return Actor(customer_id=None, role=Role.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
