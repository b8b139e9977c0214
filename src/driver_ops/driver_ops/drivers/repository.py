from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .model import Driver


class DriverRepository(Protocol):
    """Read side of the driver roster (profile editing lives elsewhere)."""

    def list_active(self) -> Sequence[Driver]:
        raise NotImplementedError

    def list_by_ids(self, driver_ids: Iterable[int]) -> Sequence[Driver]:
        raise NotImplementedError
