"""Pass-through driver that loops buffers and pings back and counts scheduler cycles."""

from __future__ import annotations

from typing import Any

from .core import Component

_U32_MASK = 0xFFFFFFFF


class BlockDriver(Component):
    """Forwards buffers and pings, reports a cycle counter on each scheduler tick."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._cycles = 0

    def buffer_in(self, buffer: Any) -> None:
        self.invoke("buffer_out", buffer)

    def sched(self, context: int) -> None:
        self.tlm_write("BD_Cycles", self._cycles)
        self._cycles = (self._cycles + 1) & _U32_MASK

    def ping_in(self, key: int) -> None:
        self.invoke("ping_out", key)