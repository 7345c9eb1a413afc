"""Ebit fabric preparing shared Bell pairs on demand."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .backends.base import AmplitudeEngine

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ebit:
    """Two halves of a Bell pair: ``local`` stays on a node, ``router`` travels."""

    local: int
    router: int


@dataclass
class EbitFabric:
    """Create and destroy ebits on top of an :class:`AmplitudeEngine`.

    Attributes
    ----------
    created:
        Number of ebits prepared over the lifetime of the fabric.
    live:
        Ebits created and not yet released.
    """

    engine: AmplitudeEngine
    created: int = field(default=0, init=False)
    live: int = field(default=0, init=False)

    def create(self) -> Ebit:
        """Allocate two qubits and entangle them into ``(|00> + |11>)/sqrt(2)``."""
        local, router = self.engine.allocate(2)
        self.engine.h(local)
        self.engine.cnot(local, router)
        self.created += 1
        self.live += 1
        LOGGER.debug("Prepared ebit local=%d router=%d", local, router)
        return Ebit(local, router)

    def release(self, ebits: Iterable[Ebit]) -> None:
        """Reset both halves of every ebit and free them."""
        for ebit in ebits:
            for half in (ebit.local, ebit.router):
                self.engine.reset(half)
            self.engine.free((ebit.local, ebit.router))
            self.live -= 1
            LOGGER.debug("Released ebit local=%d router=%d", ebit.local, ebit.router)


__all__ = ["Ebit", "EbitFabric"]
