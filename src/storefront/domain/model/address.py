"""Shipping address owned by a customer (external address store)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    id: str
    customer_id: str
    street: str
    city: str
    state: str
    zip_code: str

    def formatted(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}"
