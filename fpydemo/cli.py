"""Command line entry point that runs the demo topology until interrupted."""

from __future__ import annotations

import getopt
import os
import signal
import sys
from typing import List, Optional, Sequence

from .core import SubtopologyState, TopologyState
from .topology import Topology

_U16_MASK = 0xFFFF
TIMER_INTERVAL_SECONDS = 1.0


class UsageError(Exception):
    """Raised when usage should be shown; exit_code is 0 for help, 1 for bad input."""

    def __init__(self, exit_code: int, message: str = "") -> None:
        super().__init__(message or f"usage requested (exit code {exit_code})")
        self.exit_code = exit_code


def print_usage(app: str) -> None:
    sys.stdout.write(f"Usage: ./{app} [options]\n-a\thostname/IP address\n-p\tport_number\n")


def _atoi(text: str) -> int:
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdigit():
            break
        digits += char
    return sign * int(digits) if digits else 0


def parse_args(argv: Sequence[str]) -> TopologyState:
    """Parse -a hostname and -p port; raise UsageError for -h or bad options."""
    try:
        options, _ = getopt.getopt(list(argv), "hp:a:")
    except getopt.GetoptError as error:
        raise UsageError(1, str(error)) from None
    hostname: Optional[str] = None
    port = 0
    for option, value in options:
        if option == "-a":
            hostname = value
        elif option == "-p":
            port = _atoi(value) & _U16_MASK
        else:
            raise UsageError(0)
    return TopologyState(SubtopologyState(hostname=hostname, port=port))


def main(argv: Optional[List[str]] = None) -> int:
    app = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "fpydemo"
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        state = parse_args(args)
    except UsageError as error:
        print_usage(app)
        return error.exit_code

    topology = Topology(state)

    def _handle_signal(signum, frame):
        topology.stop_rate_groups()

    previous = {sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        print("Hit Ctrl-C to quit")
        topology.setup()
        topology.start_rate_groups(TIMER_INTERVAL_SECONDS)
        topology.teardown()
        print("Exiting...")
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 0


if __name__ == "__main__":
    sys.exit(main())