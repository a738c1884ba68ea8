"""Tests for logging context propagation."""

import contextvars
import threading

from ccfeed.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    new_run_id,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(run_id="abc123", feed="cc.xml")
    assert get_log_context() == {"run_id": "abc123", "feed": "cc.xml"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_push_override():
    """Pushing an existing key shadows it until the inner push is popped."""
    token1 = push_log_context(run_id="abc123", pipeline="pipeline1")
    token2 = push_log_context(pipeline="pipeline2")

    assert get_log_context() == {"run_id": "abc123", "pipeline": "pipeline2"}

    pop_log_context(token2)
    assert get_log_context() == {"run_id": "abc123", "pipeline": "pipeline1"}

    pop_log_context(token1)
    assert get_log_context() == {}


def test_context_manager_nested():
    with log_context(run_id="abc123") as outer:
        assert outer == {"run_id": "abc123"}

        with log_context(route="/cc.xml") as inner:
            assert inner == {"run_id": "abc123", "route": "/cc.xml"}

        assert get_log_context() == {"run_id": "abc123"}

    assert get_log_context() == {}


def test_context_manager_restores_on_exception():
    try:
        with log_context(run_id="abc123"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert get_log_context() == {}


def test_get_log_context_returns_copy():
    with log_context(run_id="abc123"):
        snapshot = get_log_context()
        snapshot["run_id"] = "changed"

        assert get_log_context() == {"run_id": "abc123"}


def test_clear_log_context():
    push_log_context(run_id="abc123")

    clear_log_context()

    assert get_log_context() == {}


def test_plain_threads_do_not_inherit_context():
    seen = {}

    with log_context(run_id="abc123"):
        thread = threading.Thread(target=lambda: seen.update(get_log_context()))
        thread.start()
        thread.join()

    assert seen == {}


def test_copied_context_carries_fields_into_thread():
    """The aggregator hands worker threads a copy of the caller's context."""
    seen = {}

    with log_context(run_id="abc123"):
        ctx = contextvars.copy_context()
        thread = threading.Thread(target=ctx.run, args=(lambda: seen.update(get_log_context()),))
        thread.start()
        thread.join()

    assert seen == {"run_id": "abc123"}


def test_new_run_id():
    run_id = new_run_id()

    assert len(run_id) == 12
    assert run_id != new_run_id()
