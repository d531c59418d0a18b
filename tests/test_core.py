"""Tests for the generator core."""

import gc

import pytest

from stepgen.generator.core import from_iterable, make_generator, step
from stepgen.generator.models import (
    DONE,
    GeneratorError,
    GeneratorRelease,
    GeneratorState,
    StepResult,
)
from stepgen.generator.utils import FiberMonitor


def letters(yield_):
    for ch in "abc":
        yield_(ch)


def test_construction_runs_nothing():
    """Test that the body does not run before the first step."""
    calls = []

    def body(yield_):
        calls.append("started")
        yield_(1)

    gen = make_generator(body)
    assert calls == []
    assert gen.state is GeneratorState.CREATED

    assert step(gen) == StepResult.of(1)
    assert calls == ["started"]
    gen.close()


def test_steps_yield_values_in_order_then_done():
    """Test stepping through a body until completion."""
    gen = make_generator(letters)

    assert gen.step() == StepResult(value="a", done=False)
    assert gen.step().value == "b"
    assert gen.state is GeneratorState.SUSPENDED
    assert gen.step().value == "c"
    assert gen.step() is DONE
    assert gen.completed


def test_done_is_idempotent():
    """Test that a completed generator never re-runs its body."""
    runs = []

    def body(yield_):
        runs.append(1)
        yield_("only")

    gen = make_generator(body)
    assert gen.step().value == "only"
    for _ in range(5):
        assert gen.step().done
    assert runs == [1]


def test_one_yield_point_per_step():
    """Test that each step resumes exactly where the body stopped."""
    trace = []

    def body(yield_):
        for i in range(4):
            trace.append(f"before {i}")
            yield_(i)
            trace.append(f"after {i}")

    gen = make_generator(body)
    gen.step()
    gen.step()
    assert trace == ["before 0", "after 0", "before 1"]
    assert gen.step().value == 2
    gen.close()


def test_body_error_propagates_and_completes():
    """Test that a body failure surfaces from the step that hits it."""

    def body(yield_):
        yield_(1)
        yield_(2)
        raise KeyError("boom")

    gen = make_generator(body)
    assert gen.step().value == 1
    assert gen.step().value == 2
    with pytest.raises(KeyError, match="boom"):
        gen.step()

    assert gen.completed
    assert gen.step() is DONE
    assert gen.step() is DONE


def test_error_on_first_step():
    """Test a body that fails before yielding anything."""

    def body(yield_):
        raise ValueError("bad input")

    gen = make_generator(body)
    with pytest.raises(ValueError, match="bad input"):
        gen.step()
    assert gen.step().done


def test_empty_body_completes_immediately():
    """Test a body that never yields."""
    gen = make_generator(lambda yield_: None)
    assert gen.step() is DONE
    assert gen.completed


def test_close_runs_finally_block():
    """Test that closing a suspended generator unwinds its body."""
    events = []

    def body(yield_):
        try:
            while True:
                yield_("data")
        finally:
            events.append("released")

    gen = make_generator(body)
    assert gen.step().value == "data"
    gen.close()

    assert events == ["released"]
    assert gen.completed
    assert gen.step() is DONE
    gen.close()


def test_close_before_start():
    """Test that closing an unstarted generator never runs the body."""
    calls = []
    gen = make_generator(lambda yield_: calls.append(1))
    gen.close()

    assert calls == []
    assert gen.step() is DONE


def test_context_manager_closes():
    """Test using a generator as a context manager."""
    monitor = FiberMonitor()
    monitor.snapshot()

    with make_generator(letters) as gen:
        assert gen.step().value == "a"

    assert gen.completed
    assert monitor.leaked() == []


def test_release_cannot_be_caught_by_except_exception():
    """Test that a release is not swallowed by a broad except clause."""
    handled = []

    def body(yield_):
        try:
            yield_(1)
        except Exception:
            handled.append("caught")

    gen = make_generator(body)
    gen.step()
    gen.close()
    assert handled == []


def test_ignoring_release_is_an_error():
    """Test that yielding again after a release fails the close."""

    def body(yield_):
        try:
            yield_(1)
        except GeneratorRelease:
            yield_(2)

    gen = make_generator(body)
    gen.step()
    with pytest.raises(GeneratorError, match="ignored release"):
        gen.close()
    assert gen.completed


def test_step_from_inside_body_is_rejected():
    """Test that a body cannot step its own generator."""
    handle = []

    def body(yield_):
        handle[0].step()
        yield_(1)

    gen = make_generator(body)
    handle.append(gen)
    with pytest.raises(GeneratorError, match="already executing"):
        gen.step()
    assert gen.completed


def test_yield_outside_body_is_rejected():
    """Test that the yield capability only works on the body's own fiber."""
    captured = []

    def body(yield_):
        captured.append(yield_)
        yield_(1)

    gen = make_generator(body)
    gen.step()
    with pytest.raises(GeneratorError, match="outside"):
        captured[0](2)
    gen.close()


def test_abandoned_generator_does_not_leak_fiber():
    """Test that dropping a suspended generator releases its fiber."""
    monitor = FiberMonitor()
    monitor.snapshot()

    gen = make_generator(letters)
    assert gen.step().value == "a"
    assert len(monitor.live_fibers()) >= 1

    del gen
    gc.collect()

    assert monitor.leaked(timeout=2.0) == []


def test_iterator_protocol():
    """Test that generators work with Python iteration."""
    assert list(make_generator(letters)) == ["a", "b", "c"]


def test_from_iterable_is_lazy_and_steps():
    """Test wrapping a native Python generator."""
    started = []

    def native():
        started.append(True)
        yield 10
        yield 20

    gen = from_iterable(native())
    assert started == []
    assert gen.step().value == 10
    assert gen.step().value == 20
    assert gen.step() is DONE
    assert gen.step() is DONE


def test_from_iterable_error_completes():
    """Test that a native failure propagates once, then the generator is done."""

    def native():
        yield 1
        raise RuntimeError("native failure")

    gen = from_iterable(native())
    gen.step()
    with pytest.raises(RuntimeError, match="native failure"):
        gen.step()
    assert gen.step().done


def test_from_iterable_close_runs_finally():
    """Test closing a wrapped native generator."""
    events = []

    def native():
        try:
            yield 1
            yield 2
        finally:
            events.append("closed")

    gen = from_iterable(native())
    gen.step()
    gen.close()
    assert events == ["closed"]
    assert gen.step().done


def test_independent_generators_keep_separate_state():
    """Test interleaving several generators."""
    a = from_iterable(range(3))
    b = make_generator(letters)

    assert a.step().value == 0
    assert b.step().value == "a"
    assert a.step().value == 1
    assert b.step().value == "b"
    b.close()


def test_from_iterable_base_exception_completes():
    """Test that a BaseException from a wrapped iterable still completes the generator."""

    def native():
        yield 1
        raise SystemExit(3)

    gen = from_iterable(native())
    assert gen.step().value == 1
    with pytest.raises(SystemExit):
        gen.step()

    assert gen.completed
    assert gen.step() is DONE
    gen.close()
