import io

import pytest

from basicauth_client.reader import OnCompleteReader


class FakeStream:
    """Minimal read/close body without a ``stream`` method."""

    def __init__(self, payload: bytes, *, close_error: Exception | None = None) -> None:
        self._buffer = io.BytesIO(payload)
        self._close_error = close_error
        self.closed = False
        self.release_count = 0

    def read(self, amt=None):
        return self._buffer.read(amt)

    def close(self):
        self.closed = True
        if self._close_error is not None:
            raise self._close_error

    def release_conn(self):
        self.release_count += 1


class Counter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


def test_read_to_end_runs_callback():
    counter = Counter()
    reader = OnCompleteReader(FakeStream(b"abcdef"), counter)

    assert reader.read(4) == b"abcd"
    assert counter.calls == 0
    assert reader.read(4) == b"ef"
    assert counter.calls == 0
    assert reader.read(4) == b""
    assert counter.calls == 1


def test_unbounded_read_runs_callback():
    counter = Counter()
    reader = OnCompleteReader(FakeStream(b"abcdef"), counter)

    assert reader.read() == b"abcdef"
    assert counter.calls == 1


def test_zero_length_read_is_not_end_of_stream():
    counter = Counter()
    reader = OnCompleteReader(FakeStream(b"abc"), counter)

    assert reader.read(0) == b""
    assert counter.calls == 0


def test_close_runs_callback_and_closes_stream():
    counter = Counter()
    stream = FakeStream(b"abcdef")
    reader = OnCompleteReader(stream, counter)

    reader.close()

    assert stream.closed
    assert counter.calls == 1


def test_callback_runs_at_most_once_across_read_and_close():
    counter = Counter()
    reader = OnCompleteReader(FakeStream(b"abc"), counter)

    reader.read()
    reader.read(10)
    reader.close()
    reader.close()

    assert counter.calls == 1


def test_close_before_read_then_drain_runs_callback_once():
    counter = Counter()
    reader = OnCompleteReader(FakeStream(b""), counter)

    reader.close()
    reader.read(10)

    assert counter.calls == 1


def test_close_error_propagates_after_callback():
    counter = Counter()
    error = OSError("socket gone")
    reader = OnCompleteReader(FakeStream(b"abc", close_error=error), counter)

    with pytest.raises(OSError) as excinfo:
        reader.close()

    assert excinfo.value is error
    assert counter.calls == 1


def test_stream_falls_back_to_read_and_runs_callback():
    counter = Counter()
    reader = OnCompleteReader(FakeStream(b"abcdef"), counter)

    chunks = list(reader.stream(4))

    assert chunks == [b"abcd", b"ef"]
    assert counter.calls == 1


def test_stream_delegates_to_wrapped_stream():
    counter = Counter()

    class Streaming(FakeStream):
        def stream(self, amt=2**16, decode_content=None):
            self.decode_content = decode_content
            yield b"chunk-1"
            yield b"chunk-2"

    raw = Streaming(b"")
    reader = OnCompleteReader(raw, counter)

    assert list(reader.stream(1024, decode_content=True)) == [b"chunk-1", b"chunk-2"]
    assert raw.decode_content is True
    assert counter.calls == 1


def test_partially_consumed_stream_does_not_run_callback():
    counter = Counter()
    reader = OnCompleteReader(FakeStream(b"abcdef"), counter)

    chunks = reader.stream(2)
    next(chunks)

    assert counter.calls == 0


def test_unknown_attributes_resolve_on_wrapped_stream():
    stream = FakeStream(b"")
    reader = OnCompleteReader(stream, Counter())

    reader.release_conn()

    assert stream.release_count == 1
    assert reader.wrapped is stream
    with pytest.raises(AttributeError):
        reader.does_not_exist


class BufferedStream(FakeStream):
    def readinto(self, buffer):
        return self._buffer.readinto(buffer)

    def read1(self, amt=None):
        return self._buffer.read1(amt if amt is not None else -1)


def test_readinto_to_end_runs_callback():
    counter = Counter()
    reader = OnCompleteReader(BufferedStream(b"abcdef"), counter)
    buffer = bytearray(4)

    assert reader.readinto(buffer) == 4
    assert reader.readinto(buffer) == 2
    assert counter.calls == 0
    assert reader.readinto(buffer) == 0
    assert counter.calls == 1


def test_readinto_empty_buffer_is_not_end_of_stream():
    counter = Counter()
    reader = OnCompleteReader(BufferedStream(b"abc"), counter)

    assert reader.readinto(bytearray()) == 0
    assert counter.calls == 0


def test_read1_to_end_runs_callback_once():
    counter = Counter()
    reader = OnCompleteReader(BufferedStream(b"abc"), counter)

    assert reader.read1(10) == b"abc"
    assert reader.read1(10) == b""
    reader.close()

    assert counter.calls == 1
