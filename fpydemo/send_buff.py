"""Sender of test packets: emits a checksummed packet on every scheduler tick when active."""

from __future__ import annotations

import struct
from enum import Enum

from .core import CmdResponse, Component, Severity
from .recv_buff import DATA_SIZE, encode_packet

PARAMETER3 = "parameter3"
PARAMETER4 = "parameter4"

_U32_MASK = 0xFFFFFFFF
_ERROR_BYTE_INDEX = 5


def _f32(value: float) -> float:
    return struct.unpack(">f", struct.pack(">f", value))[0]


class ActiveState(Enum):
    """Whether the sender is producing packets."""

    SEND_IDLE = 0
    SEND_ACTIVE = 1


class SendBuff(Component):
    """Sends a data buffer on the data port each time the scheduler invokes it."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.invocations = 0
        self.buffs_sent = 0
        self.errors_injected = 0
        self.inject_error = False
        self.send_packets = False
        self.curr_packet_id = 0
        self.first_packet_sent = False
        self.state = ActiveState.SEND_IDLE
        self.parameters = {PARAMETER3: 0, PARAMETER4: 0.0}

    def sched_in(self, context: int) -> None:
        """Drain queued commands, then send one packet if sending is active."""
        while self.do_dispatch():
            pass

        if self.send_packets:
            if self.first_packet_sent:
                self.first_packet_sent = False
                self.log_event(Severity.ACTIVITY_HI, "FirstPacketSent", self.curr_packet_id)
                self.tlm_write("NumErrorsInjected", self.errors_injected)

            packet_id = self.curr_packet_id
            self.curr_packet_id = (self.curr_packet_id + 1) & _U32_MASK
            self.buffs_sent = (self.buffs_sent + 1) & _U32_MASK
            self.tlm_write("PacketsSent", self.buffs_sent)

            data = bytearray(b"\xff" * DATA_SIZE)
            checksum = sum(data) & _U32_MASK
            if self.inject_error:
                self.inject_error = False
                self.errors_injected = (self.errors_injected + 1) & _U32_MASK
                data[_ERROR_BYTE_INDEX] = 0
                self.log_event(Severity.WARNING_HI, "PacketErrorInserted", packet_id)

            self.invoke("data", encode_packet(packet_id, bytes(data), checksum))

        self.invocations = (self.invocations + 1) & _U32_MASK
        self.tlm_write("SendState", self.state)

    def start_packets(self, opcode: int, cmd_seq: int) -> None:
        self.send_packets = True
        self.state = ActiveState.SEND_ACTIVE
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def inject_packet_error(self, opcode: int, cmd_seq: int) -> None:
        self.inject_error = True
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def gen_fatal(self, opcode: int, cmd_seq: int, arg1: int, arg2: int, arg3: int) -> None:
        self.log_event(Severity.FATAL, "SendBuffFatal", arg1, arg2, arg3)
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def gen_assert(
        self,
        opcode: int,
        cmd_seq: int,
        arg1: int,
        arg2: int,
        arg3: int,
        arg4: int,
        arg5: int,
        arg6: int,
    ) -> None:
        """Deliberately fail an assertion carrying the six arguments."""
        raise AssertionError(arg1, arg2, arg3, arg4, arg5, arg6)

    def parameter_updated(self, param_id: str) -> None:
        self.log_event(Severity.ACTIVITY_LO, "BuffSendParameterUpdated", param_id)
        if param_id == PARAMETER3:
            self.tlm_write("Parameter3", self.parameters[PARAMETER3] & 0xFF)
        elif param_id == PARAMETER4:
            self.tlm_write("Parameter4", _f32(self.parameters[PARAMETER4]))
        else:
            raise ValueError(f"unknown parameter {param_id!r}")