"""
Unit tests for stream errors
"""

import errno

import pytest

from stream_errors import (
    StreamError, UpstreamReadError, DownstreamWriteError,
    DownstreamClosedError, FlushError, is_broken_pipe
)


class TestStreamErrors:
    """Test the error taxonomy"""

    def test_message_without_cause(self):
        assert str(FlushError("error flushing to stdout")) == "error flushing to stdout"

    def test_message_with_cause(self):
        error = UpstreamReadError("error reading from stdin", cause=OSError(errno.EIO, "I/O error"))

        assert str(error) == "error reading from stdin: [Errno 5] I/O error"
        assert error.cause.errno == errno.EIO

    @pytest.mark.parametrize("cls,code", [
        (StreamError, 'stream'),
        (UpstreamReadError, 'upstream_read'),
        (DownstreamWriteError, 'downstream_write'),
        (DownstreamClosedError, 'broken_pipe'),
        (FlushError, 'flush'),
    ])
    def test_error_codes(self, cls, code):
        error = cls("failed")

        assert error.error_code == code
        assert isinstance(error, StreamError)

    def test_log_context(self):
        error = DownstreamWriteError("error writing to stdout",
                                     cause=OSError(errno.EIO, "I/O error"),
                                     details={'bytes': 12})

        context = error.log_context()

        assert context['error_type'] == 'DownstreamWriteError'
        assert context['error_code'] == 'downstream_write'
        assert context['details'] == {'bytes': 12}
        assert 'I/O error' in context['cause']
        assert context['timestamp'] > 0
        assert 'traceback' in context

    def test_repr(self):
        assert repr(FlushError("x")) == "FlushError(message='x', cause=None, details={})"


class TestIsBrokenPipe:
    """Test broken pipe classification"""

    def test_broken_pipe_error(self):
        assert is_broken_pipe(BrokenPipeError())

    def test_oserror_with_epipe(self):
        assert is_broken_pipe(OSError(errno.EPIPE, "Broken pipe"))

    @pytest.mark.parametrize("exc", [
        OSError(errno.EIO, "I/O error"),
        OSError(errno.ENOSPC, "No space left on device"),
        ConnectionResetError(),
        ValueError("I/O operation on closed file"),
    ])
    def test_other_errors(self, exc):
        assert not is_broken_pipe(exc)
