"""Simulated flight-software components, a rate-group driven topology and a command line runner."""

__version__ = "1.0.0"
__all__ = [
    "core",
    "block_driver",
    "ping_receiver",
    "recv_buff",
    "send_buff",
    "signal_gen",
    "type_demo",
    "topology",
    "cli",
]