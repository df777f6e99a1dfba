"""Unit tests for the frame reader strategies."""

import pytest

from minihttp.bootstrap.config import FramingMode
from minihttp.domain.errors import InvalidContentLength, ReadError
from minihttp.pipeline.framing import (
    declared_content_length,
    find_header_end,
    read_delimited,
    read_frame,
    read_until_short,
)


def test_short_read_stops_after_first_partial_chunk(fake_socket_factory):
    """A read shorter than the buffer ends the message even if more is coming."""

    client = fake_socket_factory([b"GET / HTTP/1.1\r\n", b"Host: x\r\n\r\n"])
    assert read_until_short(client, buffer_size=1024) == b"GET / HTTP/1.1\r\n"
    assert client.recv_sizes == [1024]


def test_short_read_continues_while_chunks_fill_the_buffer(fake_socket_factory):
    """Full-buffer reads keep the loop going until a short or empty read."""

    client = fake_socket_factory([b"abcd", b"efgh", b"ij", b"never-read"])
    assert read_until_short(client, buffer_size=4) == b"abcdefghij"


def test_short_read_stops_on_closed_stream(fake_socket_factory):
    """An empty read after full-buffer reads ends the message."""

    client = fake_socket_factory([b"abcd"])
    assert read_until_short(client, buffer_size=4) == b"abcd"


def test_delimited_read_reassembles_fragmented_request(fake_socket_factory):
    """Fragments are accumulated until the headers and declared body arrive."""

    request = (
        b"POST /files/a.txt HTTP/1.1\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello"
    )
    client = fake_socket_factory(
        [request[:10], request[10:30], request[30:52], request[52:]]
    )
    assert read_delimited(client) == request


def test_delimited_read_discards_bytes_past_content_length(fake_socket_factory):
    """Bytes beyond the declared body are not part of the request."""

    client = fake_socket_factory(
        [b"POST / HTTP/1.1\r\nContent-Length: 2\r\n\r\nokEXTRA"]
    )
    assert read_delimited(client).endswith(b"\r\n\r\nok")


def test_delimited_read_without_content_length_has_empty_body(fake_socket_factory):
    """Without Content-Length nothing after the blank line is kept."""

    client = fake_socket_factory([b"GET / HTTP/1.1\r\nHost: x\r\n\r\n"])
    assert read_delimited(client) == b"GET / HTTP/1.1\r\nHost: x\r\n\r\n"


def test_delimited_read_returns_partial_data_when_peer_closes(fake_socket_factory):
    """A stream that ends before the terminator yields what arrived."""

    client = fake_socket_factory([b"GET / HTTP/1.1\r\n"])
    assert read_delimited(client) == b"GET / HTTP/1.1\r\n"


def test_declared_content_length_is_case_insensitive():
    """The header name is matched regardless of case."""

    block = b"POST / HTTP/1.1\r\ncontent-LENGTH:  12"
    assert declared_content_length(block) == 12


@pytest.mark.parametrize("value", [b"abc", b"-1", b""])
def test_declared_content_length_rejects_invalid_values(value):
    """Non-numeric or negative lengths are parse errors."""

    with pytest.raises(InvalidContentLength):
        declared_content_length(b"POST / HTTP/1.1\r\nContent-Length: " + value)


def test_read_frame_decodes_utf8(fake_socket_factory):
    """The accumulated bytes are returned as text."""

    client = fake_socket_factory(["GET /echo/café HTTP/1.1\r\n\r\n"])
    assert read_frame(client) == "GET /echo/café HTTP/1.1\r\n\r\n"


def test_read_frame_rejects_invalid_utf8(fake_socket_factory):
    """Undecodable bytes surface as ReadError."""

    client = fake_socket_factory([b"GET /\xff HTTP/1.1\r\n\r\n"])
    with pytest.raises(ReadError):
        read_frame(client)


def test_read_frame_wraps_socket_errors(fake_socket_factory):
    """A failing recv surfaces as ReadError."""

    client = fake_socket_factory()
    client.push_error(ConnectionResetError("reset"))
    with pytest.raises(ReadError):
        read_frame(client, FramingMode.SHORT_READ)


def test_read_frame_dispatches_on_framing_mode(fake_socket_factory):
    """Short-read mode stops after a partial first read where delimited waits."""

    chunks = [b"GET / HTTP/1.1\r\n", b"Host: x\r\n\r\n"]
    short = read_frame(fake_socket_factory(chunks), FramingMode.SHORT_READ)
    delimited = read_frame(fake_socket_factory(chunks), FramingMode.DELIMITED)
    assert short == "GET / HTTP/1.1\r\n"
    assert delimited == "GET / HTTP/1.1\r\nHost: x\r\n\r\n"


def test_read_frame_returns_empty_text_for_immediate_close(fake_socket_factory):
    """A peer that closes without sending yields an empty string."""

    assert read_frame(fake_socket_factory()) == ""


@pytest.mark.parametrize(
    "request_bytes",
    [
        b"POST / HTTP/1.1\nContent-Length: 2\n\nok",
        b"POST / HTTP/1.1\r\nContent-Length: 2\r\n\nok",
        b"POST / HTTP/1.1\nContent-Length: 2\n\r\nok",
    ],
    ids=["bare-lf", "crlf-then-lf", "lf-then-crlf"],
)
def test_delimited_read_accepts_bare_lf_blank_line(fake_socket_factory, request_bytes):
    """The headers end at the first blank line however lines are terminated."""

    client = fake_socket_factory([request_bytes + b"EXTRA"])
    assert read_delimited(client) == request_bytes


def test_delimited_read_stops_at_earliest_terminator(fake_socket_factory):
    """A CRLF blank line inside the body does not extend the headers."""

    request = b"POST / HTTP/1.1\nContent-Length: 4\n\n\r\n\r\n"
    client = fake_socket_factory([request])
    assert read_delimited(client) == request


def test_find_header_end_offsets():
    assert find_header_end(b"GET / HTTP/1.1\r\n") is None
    assert find_header_end(b"GET / HTTP/1.1\r\n\r\nbody") == (15, 18)
    assert find_header_end(b"GET / HTTP/1.1\n\nbody") == (14, 16)
