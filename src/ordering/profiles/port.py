"""Buyer profile port — the delivery details captured at checkout."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DeliveryInfo:
    address: str
    phone: str
    name: str | None = None
    email: str | None = None


class ProfileStore(ABC):
    @abstractmethod
    def get_delivery_info(self, buyer_id: str) -> DeliveryInfo | None:
        """Return the buyer's current delivery details, or None if not on file."""
        ...
