from __future__ import annotations

from typing import Protocol


class RosterProvider(Protocol):
    """Source of the active usernames for an organization.

    Note (DIP): reconciliation jobs depend on this interface, not on a concrete user store.
    """

    def active_usernames(self, tenant_id: str) -> set[str]:
        raise NotImplementedError
