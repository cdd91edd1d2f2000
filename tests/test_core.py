import pytest

from fpydemo.core import (
    PING_ENTRIES,
    CmdResponse,
    Component,
    Event,
    PingEntry,
    Severity,
    SubtopologyState,
    TopologyState,
)


def test_ping_entry_defaults_match_source():
    entry = PingEntry()
    assert (entry.warn, entry.fatal) == (3, 5)
    assert PING_ENTRIES["ComFpy_cmdSeq"] == PingEntry(3, 5)
    assert PING_ENTRIES["FpyDemo_rateGroup3Comp"] == PingEntry(3, 5)


def test_topology_state_defaults():
    state = TopologyState()
    assert state.com_ccsds == SubtopologyState(hostname=None, port=0)


def test_invoke_calls_connected_handler():
    comp = Component("comp")
    received = []
    comp.connect("out", lambda *args: received.append(args))
    assert comp.is_connected("out")
    comp.invoke("out", 1, 2)
    assert received == [(1, 2)]


def test_invoke_unconnected_raises():
    comp = Component("comp")
    assert not comp.is_connected("out")
    with pytest.raises(RuntimeError):
        comp.invoke("out", 1)


def test_histories_and_clear():
    comp = Component("comp")
    comp.tlm_write("Chan", 4)
    comp.log_event(Severity.ACTIVITY_LO, "Happened", 7)
    comp.cmd_response(10, 11, CmdResponse.OK)
    assert comp.telemetry == [("Chan", 4)]
    assert comp.events == [Event(Severity.ACTIVITY_LO, "Happened", (7,))]
    assert comp.responses == [(10, 11, CmdResponse.OK)]
    comp.clear_history()
    assert (comp.telemetry, comp.events, comp.responses) == ([], [], [])


def test_cmd_response_forwarded_when_connected():
    comp = Component("comp")
    forwarded = []
    comp.connect("cmd_response", lambda *args: forwarded.append(args))
    comp.cmd_response(1, 2, CmdResponse.EXECUTION_ERROR)
    assert forwarded == [(1, 2, CmdResponse.EXECUTION_ERROR)]


def test_dispatch_runs_queue_in_order():
    comp = Component("comp")
    seen = []
    comp.enqueue(seen.append, "a")
    comp.enqueue(seen.append, "b")
    assert comp.do_dispatch() is True
    assert seen == ["a"]
    assert comp.do_dispatch() is True
    assert comp.do_dispatch() is False
    assert seen == ["a", "b"]