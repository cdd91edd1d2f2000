"""Component exercising enum, array, struct, float and scalar argument types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from .core import CmdResponse, Component, Severity

U8_MAX = 0xFF

PARAM_VALID = "VALID"
PARAM_DEFAULT = "DEFAULT"

CHOICE_PRM = "CHOICE_PRM"
CHOICES_PRM = "CHOICES_PRM"
EXTRA_CHOICES_PRM = "EXTRA_CHOICES_PRM"
CHOICE_PAIR_PRM = "CHOICE_PAIR_PRM"
GLUTTON_OF_CHOICE_PRM = "GLUTTON_OF_CHOICE_PRM"


class Choice(Enum):
    """A single selectable option."""

    ONE = 0
    TWO = 1
    RED = 2
    BLUE = 3
    YELLOW = 4


ManyChoices = Tuple[Choice, Choice]
TooManyChoices = Tuple[ManyChoices, ManyChoices]

_DEFAULT_MANY: ManyChoices = (Choice.ONE, Choice.ONE)
_DEFAULT_TOO_MANY: TooManyChoices = (_DEFAULT_MANY, _DEFAULT_MANY)


@dataclass(frozen=True)
class ChoicePair:
    """Two choices carried as a structure."""

    first_choice: Choice = Choice.ONE
    second_choice: Choice = Choice.ONE


@dataclass(frozen=True)
class ChoiceSlurry:
    """A structure nesting arrays, enums and structures of choices."""

    too_many_choices: TooManyChoices = _DEFAULT_TOO_MANY
    separate_choice: Choice = Choice.ONE
    choice_pair: ChoicePair = field(default_factory=ChoicePair)
    choice_as_member_array: Tuple[int, int] = (0, 0)

    def __post_init__(self) -> None:
        for value in self.choice_as_member_array:
            if not 0 <= value <= U8_MAX:
                raise ValueError(f"member array value {value} out of U8 range")


_INT_RANGES = {
    "u8": (0, 2**8 - 1),
    "u16": (0, 2**16 - 1),
    "u32": (0, 2**32 - 1),
    "u64": (0, 2**64 - 1),
    "i8": (-(2**7), 2**7 - 1),
    "i16": (-(2**15), 2**15 - 1),
    "i32": (-(2**31), 2**31 - 1),
    "i64": (-(2**63), 2**63 - 1),
}


@dataclass(frozen=True)
class ScalarStruct:
    """One value of every scalar type."""

    u8: int = 0
    u16: int = 0
    u32: int = 0
    u64: int = 0
    i8: int = 0
    i16: int = 0
    i32: int = 0
    i64: int = 0
    f32: float = 0.0
    f64: float = 0.0

    def __post_init__(self) -> None:
        for name, (low, high) in _INT_RANGES.items():
            value = getattr(self, name)
            if not low <= value <= high:
                raise ValueError(f"{name} value {value} out of range [{low}, {high}]")


DEFAULT_PARAMETERS: Dict[str, Any] = {
    CHOICE_PRM: Choice.ONE,
    CHOICES_PRM: _DEFAULT_MANY,
    EXTRA_CHOICES_PRM: _DEFAULT_TOO_MANY,
    CHOICE_PAIR_PRM: ChoicePair(),
    GLUTTON_OF_CHOICE_PRM: ChoiceSlurry(),
}


def _repeat_count(repeat: int, repeat_max: int) -> int:
    return max(0, min(repeat, U8_MAX, repeat_max))


class TypeDemo(Component):
    """Echoes typed command arguments to telemetry and events."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.parameters: Dict[str, Any] = {}

    def _param_get(self, param: str) -> Tuple[Any, str]:
        if param in self.parameters:
            return self.parameters[param], PARAM_VALID
        return DEFAULT_PARAMETERS[param], PARAM_DEFAULT

    def _echo(self, opcode: int, cmd_seq: int, channel: str, event: str, value: Any, times: int = 1) -> None:
        for _ in range(times):
            self.tlm_write(channel, value)
        self.log_event(Severity.ACTIVITY_HI, event, value)
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def choice(self, opcode: int, cmd_seq: int, choice: Choice) -> None:
        self._echo(opcode, cmd_seq, "ChoiceCh", "ChoiceEv", choice)

    def choices(self, opcode: int, cmd_seq: int, choices: ManyChoices) -> None:
        self._echo(opcode, cmd_seq, "ChoicesCh", "ChoicesEv", tuple(choices))

    def choices_with_friends(
        self, opcode: int, cmd_seq: int, repeat: int, choices: ManyChoices, repeat_max: int
    ) -> None:
        self._echo(opcode, cmd_seq, "ChoicesCh", "ChoicesEv", tuple(choices), _repeat_count(repeat, repeat_max))

    def extra_choices(self, opcode: int, cmd_seq: int, choices: TooManyChoices) -> None:
        self._echo(opcode, cmd_seq, "ExtraChoicesCh", "ExtraChoicesEv", tuple(choices))

    def extra_choices_with_friends(
        self, opcode: int, cmd_seq: int, repeat: int, choices: TooManyChoices, repeat_max: int
    ) -> None:
        self._echo(
            opcode, cmd_seq, "ExtraChoicesCh", "ExtraChoicesEv", tuple(choices), _repeat_count(repeat, repeat_max)
        )

    def choice_pair(self, opcode: int, cmd_seq: int, choices: ChoicePair) -> None:
        self._echo(opcode, cmd_seq, "ChoicePairCh", "ChoicePairEv", choices)

    def choice_pair_with_friends(
        self, opcode: int, cmd_seq: int, repeat: int, choices: ChoicePair, repeat_max: int
    ) -> None:
        self._echo(opcode, cmd_seq, "ChoicePairCh", "ChoicePairEv", choices, _repeat_count(repeat, repeat_max))

    def glutton_of_choice(self, opcode: int, cmd_seq: int, choices: ChoiceSlurry) -> None:
        self._echo(opcode, cmd_seq, "ChoiceSlurryCh", "ChoiceSlurryEv", choices)

    def glutton_of_choice_with_friends(
        self, opcode: int, cmd_seq: int, repeat: int, choices: ChoiceSlurry, repeat_max: int
    ) -> None:
        self._echo(opcode, cmd_seq, "ChoiceSlurryCh", "ChoiceSlurryEv", choices, _repeat_count(repeat, repeat_max))

    def dump_typed_parameters(self, opcode: int, cmd_seq: int) -> None:
        """Emit one event per typed parameter with its value and validity."""
        for param, event in (
            (CHOICE_PRM, "ChoicePrmEv"),
            (CHOICES_PRM, "ChoicesPrmEv"),
            (EXTRA_CHOICES_PRM, "ExtraChoicesPrmEv"),
            (CHOICE_PAIR_PRM, "ChoicePairPrmEv"),
            (GLUTTON_OF_CHOICE_PRM, "ChoiceSlurryPrmEv"),
        ):
            value, validity = self._param_get(param)
            self.log_event(Severity.ACTIVITY_HI, event, value, validity)
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def dump_floats(self, opcode: int, cmd_seq: int) -> None:
        """Report infinity, negative infinity and NaN."""
        invalid = (math.inf, -math.inf, math.nan)
        self.log_event(Severity.ACTIVITY_HI, "FloatEv", invalid[0], invalid[1], invalid[2], invalid)
        self.tlm_write("Float1Ch", invalid[0])
        self.tlm_write("Float2Ch", invalid[1])
        self.tlm_write("Float3Ch", invalid[2])
        self.tlm_write("FloatSet", invalid)
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)

    def send_scalars(self, opcode: int, cmd_seq: int, scalar_input: ScalarStruct) -> None:
        self.log_event(Severity.ACTIVITY_HI, "ScalarStructEv", scalar_input)
        self.tlm_write("ScalarStructCh", scalar_input)
        for member in ("u8", "u16", "u32", "u64", "i8", "i16", "i32", "i64", "f32", "f64"):
            self.tlm_write(f"Scalar{member.upper()}Ch", getattr(scalar_input, member))
        self.cmd_response(opcode, cmd_seq, CmdResponse.OK)