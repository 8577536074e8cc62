import time

import pytest

from bglog.logworker import LogWorker, SinkHandle


class StringSink:
    def __init__(self):
        self.raw = ""

    def append(self, entry):
        self.raw += entry

    def string(self):
        return self.raw


class CountingSink:
    def __init__(self):
        self.received = False
        self.count = 0

    def receive(self, message):
        self.received = True
        self.count += 1


def _wait_for(handle, func, expected, timeout=5.0):
    deadline = time.monotonic() + timeout
    while True:
        value = handle.call(func).result(timeout=timeout)
        if value == expected or time.monotonic() > deadline:
            return value
        time.sleep(0.01)


def test_create_handle():
    with LogWorker() as worker:
        handle = worker.add_sink(StringSink(), StringSink.append)
        assert isinstance(handle, SinkHandle)
        assert handle.call(StringSink.string).result(timeout=5) == ""


def test_one_sink_verify_msg_in():
    with LogWorker() as worker:
        handle = worker.add_sink(StringSink(), StringSink.append)
        worker.save("Hello World!")
        content = _wait_for(handle, StringSink.string, "Hello World!")
        assert "Hello World!" in content


def test_dual_sink_verify_msg_in():
    with LogWorker() as worker:
        h1 = worker.add_sink(StringSink(), StringSink.append)
        h2 = worker.add_sink(StringSink(), StringSink.append)
        worker.save("Hello World!")
        assert _wait_for(h1, StringSink.string, "Hello World!") == "Hello World!"
        assert _wait_for(h2, StringSink.string, "Hello World!") == "Hello World!"


def test_call_passes_arguments():
    with LogWorker() as worker:
        handle = worker.add_sink(StringSink(), StringSink.append)
        handle.call(StringSink.append, "abc").result(timeout=5)
        assert handle.call(lambda sink, suffix: sink.raw + suffix, "!").result(timeout=5) == "abc!"


def test_deleted_sink_raises_reference_error():
    worker = LogWorker()
    h1 = worker.add_sink(StringSink(), StringSink.append)
    worker.save("Hello World!")
    worker.close()
    with pytest.raises(ReferenceError):
        h1.call(StringSink.string).result(timeout=5)


def test_one_sink_with_handle_out_of_scope():
    sink = CountingSink()
    with LogWorker() as worker:
        worker.add_sink(sink, CountingSink.receive)
        assert sink.received is False
        assert sink.count == 0
        worker.save("this message should trigger an increment at the sink")
    assert sink.received is True
    assert sink.count == 1


def test_remove_sink_stops_delivery():
    sink = StringSink()
    with LogWorker() as worker:
        handle = worker.add_sink(sink, StringSink.append)
        worker.save("before")
        worker.remove_sink(handle)
        assert sink.raw == "before"
        worker.save("after")
    assert sink.raw == "before"
    with pytest.raises(ReferenceError):
        handle.call(StringSink.string).result(timeout=5)


def test_remove_none_handle_is_noop():
    sink = StringSink()
    with LogWorker() as worker:
        worker.add_sink(sink, StringSink.append)
        worker.remove_sink(None)
        worker.save("kept")
    assert sink.raw == "kept"


def test_remove_all_sinks():
    first, second = StringSink(), StringSink()
    with LogWorker() as worker:
        h1 = worker.add_sink(first, StringSink.append)
        worker.add_sink(second, StringSink.append)
        worker.save("x")
        worker.remove_all_sinks()
        worker.save("y")
    assert first.raw == "x"
    assert second.raw == "x"
    with pytest.raises(ReferenceError):
        h1.call(StringSink.string).result(timeout=5)


def test_fatal_flushes_then_calls_handler():
    calls = []
    sink = StringSink()
    worker = LogWorker(fatal_handler=calls.append)
    handle = worker.add_sink(sink, StringSink.append)
    worker.save("a")
    worker.fatal("b")
    worker.close()
    assert sink.raw == "ab"
    assert calls == ["b"]
    with pytest.raises(ReferenceError):
        handle.call(StringSink.string).result(timeout=5)


def test_save_after_close_raises():
    worker = LogWorker()
    worker.close()
    with pytest.raises(RuntimeError):
        worker.save("late")