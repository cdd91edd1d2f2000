"""Receiver of test packets: checks checksums and reports packet statistics."""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .core import Component, Severity

DATA_SIZE = 24
PARAMETER1 = "parameter1"
PARAMETER2 = "parameter2"

_U32_MASK = 0xFFFFFFFF
_HEADER = struct.Struct(">IH")
_CHECKSUM = struct.Struct(">I")


def _f32(value: float) -> float:
    return struct.unpack(">f", struct.pack(">f", value))[0]


class PacketRecvStatus(Enum):
    PACKET_STATE_NO_PACKETS = 0
    PACKET_STATE_OK = 1
    PACKET_STATE_ERRORS = 2


@dataclass
class PacketStat:
    """Receive statistics reported as telemetry."""

    buff_recv: int = 0
    buff_err: int = 0
    packet_status: PacketRecvStatus = PacketRecvStatus.PACKET_STATE_NO_PACKETS


def encode_packet(packet_id: int, data: bytes, checksum: int) -> bytes:
    """Serialize a packet: U32 id, U16 length, data bytes, U32 checksum, big-endian."""
    if len(data) > 0xFFFF:
        raise ValueError("packet data too long")
    return _HEADER.pack(packet_id, len(data)) + bytes(data) + _CHECKSUM.pack(checksum)


def decode_packet(buffer: bytes) -> Tuple[int, bytes, int]:
    """Parse a packet into (id, data, checksum); raise ValueError if malformed."""
    buffer = bytes(buffer)
    if len(buffer) < _HEADER.size:
        raise ValueError("packet too short for header")
    packet_id, length = _HEADER.unpack_from(buffer)
    if length > DATA_SIZE:
        raise ValueError(f"packet data length {length} exceeds {DATA_SIZE}")
    end = _HEADER.size + length
    if len(buffer) < end + _CHECKSUM.size:
        raise ValueError("packet truncated")
    data = buffer[_HEADER.size:end]
    (checksum,) = _CHECKSUM.unpack_from(buffer, end)
    return packet_id, data, checksum


class RecvBuff(Component):
    """Validates received packets and updates simulated sensor channels."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.stats = PacketStat()
        self.first_buff_received = False
        self.sensor1 = _f32(1000.0)
        self.sensor2 = _f32(10.0)
        self.parameters = {PARAMETER1: 0, PARAMETER2: 0}

    def data(self, buffer: bytes) -> None:
        self.stats.buff_recv = (self.stats.buff_recv + 1) & _U32_MASK
        packet_id, payload, checksum = decode_packet(buffer)

        if not self.first_buff_received:
            self.log_event(Severity.ACTIVITY_LO, "FirstPacketReceived", packet_id)
            self.stats.packet_status = PacketRecvStatus.PACKET_STATE_OK
            self.first_buff_received = True

        if sum(payload) & _U32_MASK != checksum:
            self.stats.buff_err = (self.stats.buff_err + 1) & _U32_MASK
            self.log_event(Severity.WARNING_HI, "PacketChecksumError", packet_id)
            self.stats.packet_status = PacketRecvStatus.PACKET_STATE_ERRORS

        self.sensor1 = _f32(self.sensor1 + 5.0)
        self.sensor2 = _f32(self.sensor2 + _f32(1.2))
        self.tlm_write("Sensor1", self.sensor1)
        self.tlm_write("Sensor2", self.sensor2)
        self.tlm_write("PktState", replace(self.stats))

    def parameter_updated(self, param_id: str) -> None:
        self.log_event(Severity.ACTIVITY_LO, "BuffRecvParameterUpdated", param_id)
        if param_id == PARAMETER1:
            self.tlm_write("Parameter1", self.parameters[PARAMETER1])
        elif param_id == PARAMETER2:
            self.tlm_write("Parameter2", self.parameters[PARAMETER2])
        else:
            raise ValueError(f"unknown parameter {param_id!r}")