"""Component framework shared by the demo deployment: ports, telemetry, events and queues."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

CMD_RESPONSE_PORT = "cmd_response"


class CmdResponse(Enum):
    """Outcome reported for a command."""

    OK = 0
    INVALID_OPCODE = 1
    VALIDATION_ERROR = 2
    FORMAT_ERROR = 3
    EXECUTION_ERROR = 4
    BUSY = 5


class Severity(Enum):
    """Severity of an emitted event."""

    FATAL = "FATAL"
    WARNING_HI = "WARNING_HI"
    WARNING_LO = "WARNING_LO"
    COMMAND = "COMMAND"
    ACTIVITY_HI = "ACTIVITY_HI"
    ACTIVITY_LO = "ACTIVITY_LO"
    DIAGNOSTIC = "DIAGNOSTIC"


@dataclass(frozen=True)
class Event:
    """An event logged by a component."""

    severity: Severity
    name: str
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class PingEntry:
    """Number of missed health pings tolerated before a warning and before a fatal."""

    warn: int = 3
    fatal: int = 5


PING_ENTRIES: Dict[str, PingEntry] = {
    name: PingEntry()
    for name in (
        "ComFpy_cmdSeq",
        "FpyDemo_blockDrv",
        "FpyDemo_pingRcvr",
        "FpyDemo_rateGroup1Comp",
        "FpyDemo_rateGroup2Comp",
        "FpyDemo_rateGroup3Comp",
    )
}


@dataclass
class SubtopologyState:
    """Connection settings for the communications subtopology."""

    hostname: Optional[str] = None
    port: int = 0


@dataclass
class TopologyState:
    """State handed to the topology from the command line."""

    com_ccsds: SubtopologyState = field(default_factory=SubtopologyState)


class Component:
    """Base for components: named output ports, histories and a message queue."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._ports: Dict[str, Callable[..., Any]] = {}
        self._queue: Deque[Tuple[Callable[..., Any], Tuple[Any, ...]]] = deque()
        self.telemetry: List[Tuple[str, Any]] = []
        self.events: List[Event] = []
        self.responses: List[Tuple[int, int, CmdResponse]] = []

    def connect(self, port: str, handler: Callable[..., Any]) -> None:
        """Wire an output port to a callable."""
        self._ports[port] = handler

    def is_connected(self, port: str) -> bool:
        return port in self._ports

    def invoke(self, port: str, *args: Any) -> Any:
        """Call the handler connected to an output port."""
        try:
            handler = self._ports[port]
        except KeyError:
            raise RuntimeError(f"{self.name}: output port {port!r} is not connected") from None
        return handler(*args)

    def tlm_write(self, channel: str, value: Any) -> None:
        self.telemetry.append((channel, value))

    def log_event(self, severity: Severity, name: str, *args: Any) -> None:
        self.events.append(Event(severity, name, args))

    def cmd_response(self, opcode: int, cmd_seq: int, response: CmdResponse) -> None:
        """Record a command response and forward it if a dispatcher is connected."""
        self.responses.append((opcode, cmd_seq, response))
        if self.is_connected(CMD_RESPONSE_PORT):
            self.invoke(CMD_RESPONSE_PORT, opcode, cmd_seq, response)

    def enqueue(self, handler: Callable[..., Any], *args: Any) -> None:
        """Queue a call to be run by do_dispatch."""
        self._queue.append((handler, args))

    def do_dispatch(self) -> bool:
        """Run one queued message; return False when the queue was empty."""
        if not self._queue:
            return False
        handler, args = self._queue.popleft()
        handler(*args)
        return True

    def clear_history(self) -> None:
        self.telemetry.clear()
        self.events.clear()
        self.responses.clear()