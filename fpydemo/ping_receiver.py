"""Component that answers health pings until told to stop."""

from __future__ import annotations

from .core import CmdResponse, Component

_U32_MASK = 0xFFFFFFFF


class PingReceiver(Component):
    """Counts incoming pings and echoes them unless pings are inhibited."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._inhibit_pings = False
        self._pings_received = 0

    def ping_in(self, key: int) -> None:
        self.tlm_write("PR_NumPings", self._pings_received)
        self._pings_received = (self._pings_received + 1) & _U32_MASK
        if not self._inhibit_pings:
            self.invoke("ping_out", key)

    def stop_pings(self, opcode: int, cmd_seq: int) -> None:
        self._inhibit_pings = True
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)