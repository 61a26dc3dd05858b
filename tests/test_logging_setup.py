import structlog

from logging_setup import TraceContext, new_trace_id


def test_trace_context_binds_and_unbinds():
    trace_id = new_trace_id()
    assert len(trace_id) == 8

    with TraceContext(trace_id, entry="test"):
        bound = structlog.contextvars.get_contextvars()
        assert bound["trace_id"] == trace_id
        assert bound["entry"] == "test"

    bound = structlog.contextvars.get_contextvars()
    assert "trace_id" not in bound
    assert "entry" not in bound
