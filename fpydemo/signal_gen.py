"""Signal generator component producing waveforms as telemetry and data products."""

from __future__ import annotations

import math
import random
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .core import CmdResponse, Component, Severity

HISTORY_SIZE = 4
CONTAINER_ID = 0
RECORD_ID = 0
DP_ID_SIZE = 4

_U32_MASK = 0xFFFFFFFF


def _f32(value: float) -> float:
    return struct.unpack(">f", struct.pack(">f", value))[0]


class SignalType(Enum):
    TRIANGLE = 0
    SQUARE = 1
    SINE = 2
    NOISE = 3


class DpReqType(Enum):
    IMMEDIATE = 0
    ASYNC = 1


@dataclass(frozen=True)
class SignalPair:
    time: float = 0.0
    value: float = 0.0


_ZERO_HISTORY: Tuple[float, ...] = (0.0,) * HISTORY_SIZE
_ZERO_PAIRS: Tuple[SignalPair, ...] = (SignalPair(),) * HISTORY_SIZE


@dataclass(frozen=True)
class SignalInfo:
    """Signal type together with recent sample and pair histories."""

    type: SignalType
    history: Tuple[float, ...] = _ZERO_HISTORY
    pair_history: Tuple[SignalPair, ...] = _ZERO_PAIRS

    SERIALIZED_SIZE = 4 + 4 * HISTORY_SIZE + 8 * HISTORY_SIZE


def _serialize_info(info: SignalInfo) -> bytes:
    out = struct.pack(">i", info.type.value)
    out += struct.pack(f">{HISTORY_SIZE}f", *info.history)
    for pair in info.pair_history:
        out += struct.pack(">ff", pair.time, pair.value)
    return out


@dataclass
class DataContainer:
    """A data product buffer that records are serialized into."""

    container_id: int
    buffer: bytearray
    priority: int = 0
    _offset: int = field(default=0, repr=False)

    @property
    def used(self) -> int:
        return self._offset

    def serialize_record(self, record: SignalInfo) -> bool:
        """Append a record; return False if the buffer has no room left."""
        payload = struct.pack(">I", RECORD_ID) + _serialize_info(record)
        end = self._offset + len(payload)
        if end > len(self.buffer):
            return False
        self.buffer[self._offset:end] = payload
        self._offset = end
        return True


class SignalGen(Component):
    """Generates a configurable waveform sample on each scheduler tick."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.sample_frequency = 25
        self.signal_frequency = 1
        self.signal_amplitude = 0.0
        self.signal_phase = 0.0
        self.ticks = 0
        self.sig_type = SignalType.SINE
        self.sig_history: Tuple[float, ...] = _ZERO_HISTORY
        self.sig_pair_history: Tuple[SignalPair, ...] = _ZERO_PAIRS
        self.running = False
        self.skip_one = False
        self.dp_container: Optional[DataContainer] = None
        self.dp_in_progress = False
        self.num_dps = 0
        self.curr_dp = 0
        self.dp_bytes = 0
        self.dp_priority = 0
        self._rng = random.Random()

    def generate_sample(self, ticks: int) -> float:
        """Compute the signal value at the given tick."""
        if self.skip_one:
            return 0.0
        samples_per_period = _f32(_f32(self.sample_frequency) / _f32(self.signal_frequency))
        half = int(samples_per_period / 2)
        amplitude = self.signal_amplitude
        if self.sig_type is SignalType.TRIANGLE:
            slope = _f32(amplitude / _f32(half))
            return _f32(slope * _f32(ticks % half))
        if self.sig_type is SignalType.SINE:
            normalized = _f32(1.0 / samples_per_period)
            angle = 2.0 * math.pi * normalized * _f32(ticks) + self.signal_phase * 2.0 * math.pi
            return _f32(amplitude * math.sin(angle))
        if self.sig_type is SignalType.SQUARE:
            high = ticks % int(samples_per_period) < half
            return _f32(amplitude * (1.0 if high else -1.0))
        if self.sig_type is SignalType.NOISE:
            return _f32(amplitude * self._rng.random())
        raise AssertionError(f"unknown signal type {self.sig_type!r}")

    def sched_in(self, context: int) -> None:
        self.do_dispatch()
        if not self.running:
            return
        value = 0.0 if self.skip_one else self.generate_sample(self.ticks)
        self.skip_one = False

        pair = SignalPair(_f32(self.ticks), value)
        self.sig_history = self.sig_history[1:] + (value,)
        self.sig_pair_history = self.sig_pair_history[1:] + (pair,)
        info = SignalInfo(self.sig_type, self.sig_history, self.sig_pair_history)

        self.tlm_write("Type", self.sig_type)
        self.tlm_write("Output", value)
        self.tlm_write("PairOutput", pair)
        self.tlm_write("History", self.sig_history)
        self.tlm_write("PairHistory", self.sig_pair_history)
        self.tlm_write("Info", info)

        if self.dp_in_progress and self.dp_container is not None:
            stored = self.dp_container.serialize_record(info)
            self.curr_dp = (self.curr_dp + 1) & _U32_MASK
            self.dp_bytes = (self.dp_bytes + SignalInfo.SERIALIZED_SIZE) & _U32_MASK
            if not stored:
                self.log_event(Severity.WARNING_LO, "DpRecordFull", self.curr_dp, self.dp_bytes)
                self._cleanup_and_send_dp()
            elif self.curr_dp == self.num_dps:
                self.log_event(Severity.ACTIVITY_LO, "DpComplete", self.num_dps, self.dp_bytes)
                self._cleanup_and_send_dp()
            self.tlm_write("DpBytes", self.dp_bytes)
            self.tlm_write("DpRecords", self.curr_dp)

        self.ticks = (self.ticks + 1) & _U32_MASK

    def settings(
        self,
        opcode: int,
        cmd_seq: int,
        frequency: int,
        amplitude: float,
        phase: float,
        sig_type: SignalType,
    ) -> None:
        self.signal_frequency = frequency
        self.signal_amplitude = _f32(amplitude)
        self.signal_phase = _f32(phase)
        self.sig_type = sig_type
        self.sig_history = _ZERO_HISTORY
        self.sig_pair_history = _ZERO_PAIRS
        self.log_event(
            Severity.ACTIVITY_LO,
            "SettingsChanged",
            self.signal_frequency,
            self.signal_amplitude,
            self.signal_phase,
            self.sig_type,
        )
        self.tlm_write("Type", sig_type)
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def toggle(self, opcode: int, cmd_seq: int) -> None:
        self.running = not self.running
        self.ticks = 0
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def skip(self, opcode: int, cmd_seq: int) -> None:
        self.skip_one = True
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def dp(self, opcode: int, cmd_seq: int, req_type: DpReqType, records: int, priority: int) -> None:
        """Start a data product of the given number of records."""
        if records == 0:
            self.log_event(Severity.WARNING_HI, "InSufficientDpRecords")
            self.cmd_response(opcode, cmd_seq, CmdResponse.VALIDATION_ERROR)
            return
        if not self.is_connected("product_get"):
            self.log_event(Severity.WARNING_HI, "DpsNotConnected")
            self.cmd_response(opcode, cmd_seq, CmdResponse.EXECUTION_ERROR)
            return

        dp_size = records * (SignalInfo.SERIALIZED_SIZE + DP_ID_SIZE)
        self.num_dps = records
        self.curr_dp = 0
        self.dp_priority = priority
        self.log_event(Severity.ACTIVITY_LO, "DpMemRequested", dp_size)

        if req_type is DpReqType.IMMEDIATE:
            buffer = self.invoke("product_get", CONTAINER_ID, dp_size)
            if buffer is None:
                self.log_event(Severity.WARNING_HI, "DpMemoryFail")
                self.cmd_response(opcode, cmd_seq, CmdResponse.EXECUTION_ERROR)
                return
            self.dp_container = DataContainer(CONTAINER_ID, bytearray(buffer))
            self.dp_in_progress = True
            self.log_event(Severity.ACTIVITY_LO, "DpStarted", records)
            self.log_event(Severity.ACTIVITY_LO, "DpMemReceived", len(self.dp_container.buffer))
            self.cmd_response(opcode, cmd_seq, CmdResponse.OK)
            self.dp_container.priority = self.dp_priority
        elif req_type is DpReqType.ASYNC:
            self.invoke("product_request", CONTAINER_ID, dp_size)
            self.cmd_response(opcode, cmd_seq, CmdResponse.OK)
        else:
            raise AssertionError(f"unknown request type {req_type!r}")

    def dp_recv(self, container: DataContainer, status: bool) -> None:
        """Accept an asynchronously requested container, or give up on failure."""
        if status:
            self.dp_container = container
            self.dp_in_progress = True
            container.priority = self.dp_priority
            self.log_event(Severity.ACTIVITY_LO, "DpStarted", self.num_dps)
        else:
            self.log_event(Severity.WARNING_HI, "DpMemoryFail")
            self.dp_in_progress = False
            self.dp_bytes = 0
            self.num_dps = 0
            self.curr_dp = 0

    def _cleanup_and_send_dp(self) -> None:
        self.invoke("product_send", self.dp_container)
        self.dp_in_progress = False
        self.dp_bytes = 0
        self.num_dps = 0
        self.curr_dp = 0