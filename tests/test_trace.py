"""Test join tracing using pytest."""

from gratify import JoinConfig, Trace, all_successes, join_successes

from fakes import pending


def test_record_assigns_sequential_ids():
    trace = Trace()
    assert trace.record("a") == 0
    assert trace.record("b", parent_id=0) == 1
    assert len(trace) == 2
    assert trace.as_tree() == {None: [0], 0: [1]}


def test_disabled_trace_records_nothing():
    trace = Trace(enabled=False)
    assert trace.record("a") is None
    assert len(trace) == 0


def test_clear_resets_ids():
    trace = Trace()
    trace.record("a")
    trace.clear()
    assert len(trace) == 0
    assert trace.record("b") == 0


def test_join_records_begin_outcomes_and_end():
    trace = Trace()
    ops = pending(2)
    join_successes(*ops, config=JoinConfig(name="pair"), trace=trace)
    ops[1].fail("x")
    ops[0].succeed("y")

    actions = [ev.action for ev in trace.get_events()]
    assert actions == ["join_begin", "operation_failed", "operation_succeeded", "join_end"]

    begin = trace.find_all("join_begin")[0]
    assert begin.info == {"join": "pair", "policy": "successes", "operations": 2}

    end = trace.find_all("join_end")[0]
    assert end.info["outcome"] == "succeeded"
    assert end.duration_ms is not None and end.duration_ms >= 0
    assert trace.as_tree()[begin.id] == [1, 2, 3]


def test_late_outcomes_are_marked():
    trace = Trace()
    ops = pending(2)
    all_successes(*ops, trace=trace)
    ops[0].fail("x")
    ops[1].succeed("y")

    late = trace.find_all("operation_succeeded")[0]
    assert late.info == {"index": 1, "late": True}
    assert trace.find_all("join_end")[0].info["outcome"] == "failed"


def test_outcome_events_can_be_turned_off():
    trace = Trace()
    ops = pending(1)
    join_successes(*ops, config=JoinConfig(trace_outcomes=False), trace=trace)
    ops[0].succeed(1)
    assert [ev.action for ev in trace.get_events()] == ["join_begin", "join_end"]


def test_joins_can_share_a_trace():
    trace = Trace()
    a, b = pending(2)
    inner = join_successes(a, trace=trace)
    join_successes(inner, b, trace=trace)
    a.succeed(1)
    b.succeed(2)

    begins = trace.find_all("join_begin")
    assert len(begins) == 2
    tree = trace.as_tree()
    assert tree[None] == [begins[0].id, begins[1].id]
    assert len(trace.find_all("join_end")) == 2
