"""In-memory profile store for development and testing."""

from ordering.profiles.port import DeliveryInfo, ProfileStore


class InMemoryProfileStore(ProfileStore):
    def __init__(self) -> None:
        self._profiles: dict[str, DeliveryInfo] = {}

    def set_delivery_info(self, buyer_id: str, info: DeliveryInfo) -> None:
        self._profiles[str(buyer_id)] = info

    def get_delivery_info(self, buyer_id: str) -> DeliveryInfo | None:
        return self._profiles.get(str(buyer_id))
