"""Profile store factory, mirroring the catalog factory."""

from ordering.profiles.memory_adapter import InMemoryProfileStore
from ordering.profiles.port import DeliveryInfo, ProfileStore

__all__ = ["DeliveryInfo", "InMemoryProfileStore", "ProfileStore", "get_profiles", "reset_profiles", "set_profiles"]

_current_profiles: ProfileStore | None = None


def get_profiles() -> ProfileStore:
    global _current_profiles
    if _current_profiles is None:
        _current_profiles = InMemoryProfileStore()
    return _current_profiles


def set_profiles(profiles: ProfileStore) -> None:
    global _current_profiles
    _current_profiles = profiles


def reset_profiles() -> None:
    global _current_profiles
    _current_profiles = None
