import math

import pytest

from fpydemo.core import CmdResponse, Severity
from fpydemo.type_demo import (
    CHOICE_PRM,
    PARAM_DEFAULT,
    PARAM_VALID,
    Choice,
    ChoicePair,
    ChoiceSlurry,
    ScalarStruct,
    TypeDemo,
)


@pytest.fixture
def demo():
    return TypeDemo("typeDemo")


def test_choice_echoes(demo):
    demo.choice(7, 3, Choice.RED)
    assert demo.telemetry == [("ChoiceCh", Choice.RED)]
    assert demo.events[0].severity is Severity.ACTIVITY_HI
    assert demo.events[0].name == "ChoiceEv"
    assert demo.events[0].args == (Choice.RED,)
    assert demo.responses == [(7, 3, CmdResponse.OK)]


def test_choices_echoes_array(demo):
    demo.choices(1, 2, [Choice.ONE, Choice.BLUE])
    assert demo.telemetry == [("ChoicesCh", (Choice.ONE, Choice.BLUE))]
    assert demo.responses == [(1, 2, CmdResponse.OK)]


@pytest.mark.parametrize(
    "repeat,repeat_max,expected",
    [(3, 2, 2), (2, 5, 2), (0, 5, 0), (4, 0, 0), (255, 255, 255)],
)
def test_choices_with_friends_repeat_limit(demo, repeat, repeat_max, expected):
    demo.choices_with_friends(1, 1, repeat, (Choice.TWO, Choice.RED), repeat_max)
    assert len(demo.telemetry) == expected
    assert all(entry == ("ChoicesCh", (Choice.TWO, Choice.RED)) for entry in demo.telemetry)
    assert [event.name for event in demo.events] == ["ChoicesEv"]
    assert demo.responses == [(1, 1, CmdResponse.OK)]


def test_extra_choices_with_friends(demo):
    choices = ((Choice.ONE, Choice.TWO), (Choice.RED, Choice.YELLOW))
    demo.extra_choices_with_friends(2, 9, 3, choices, 10)
    assert demo.telemetry == [("ExtraChoicesCh", choices)] * 3
    assert demo.events[0].name == "ExtraChoicesEv"


def test_extra_choices(demo):
    choices = ((Choice.BLUE, Choice.BLUE), (Choice.RED, Choice.ONE))
    demo.extra_choices(0, 0, choices)
    assert demo.telemetry == [("ExtraChoicesCh", choices)]


def test_choice_pair_and_friends(demo):
    pair = ChoicePair(Choice.RED, Choice.BLUE)
    demo.choice_pair(0, 1, pair)
    demo.choice_pair_with_friends(0, 2, 5, pair, 1)
    assert demo.telemetry == [("ChoicePairCh", pair), ("ChoicePairCh", pair)]
    assert [e.name for e in demo.events] == ["ChoicePairEv", "ChoicePairEv"]
    assert [r[1] for r in demo.responses] == [1, 2]


def test_glutton_of_choice(demo):
    slurry = ChoiceSlurry(separate_choice=Choice.YELLOW, choice_as_member_array=(1, 2))
    demo.glutton_of_choice(0, 0, slurry)
    demo.glutton_of_choice_with_friends(0, 0, 2, slurry, 2)
    assert demo.telemetry == [("ChoiceSlurryCh", slurry)] * 3
    assert demo.events[-1].args == (slurry,)


def test_choice_slurry_rejects_out_of_range_member():
    with pytest.raises(ValueError):
        ChoiceSlurry(choice_as_member_array=(256, 0))


def test_dump_typed_parameters_defaults(demo):
    demo.dump_typed_parameters(4, 5)
    assert [e.name for e in demo.events] == [
        "ChoicePrmEv",
        "ChoicesPrmEv",
        "ExtraChoicesPrmEv",
        "ChoicePairPrmEv",
        "ChoiceSlurryPrmEv",
    ]
    assert all(e.args[1] == PARAM_DEFAULT for e in demo.events)
    assert demo.responses == [(4, 5, CmdResponse.OK)]


def test_dump_typed_parameters_set_value(demo):
    demo.parameters[CHOICE_PRM] = Choice.YELLOW
    demo.dump_typed_parameters(0, 0)
    assert demo.events[0].args == (Choice.YELLOW, PARAM_VALID)
    assert demo.events[1].args[1] == PARAM_DEFAULT


def test_dump_floats(demo):
    demo.dump_floats(0, 0)
    channels = dict(demo.telemetry)
    assert channels["Float1Ch"] == math.inf
    assert channels["Float2Ch"] == -math.inf
    assert math.isnan(channels["Float3Ch"])
    assert channels["FloatSet"][:2] == (math.inf, -math.inf)
    event = demo.events[0]
    assert event.name == "FloatEv"
    assert math.isnan(event.args[2])
    assert demo.responses == [(0, 0, CmdResponse.OK)]


def test_send_scalars(demo):
    scalars = ScalarStruct(u8=1, u16=2, u32=3, u64=4, i8=-1, i16=-2, i32=-3, i64=-4, f32=1.5, f64=2.5)
    demo.send_scalars(0, 0, scalars)
    channels = dict(demo.telemetry)
    assert len(demo.telemetry) == 11
    assert channels["ScalarStructCh"] == scalars
    assert channels["ScalarU8Ch"] == 1
    assert channels["ScalarI64Ch"] == -4
    assert channels["ScalarF64Ch"] == 2.5
    assert demo.events[0].args == (scalars,)


@pytest.mark.parametrize("kwargs", [{"u8": 256}, {"i8": -129}, {"u64": -1}, {"i32": 2**31}])
def test_scalar_struct_range_checks(kwargs):
    with pytest.raises(ValueError):
        ScalarStruct(**kwargs)