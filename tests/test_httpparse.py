import pytest

from reactorhttp.httpparse import (
    HeaderParser,
    HeaderState,
    HttpVersion,
    Method,
    ParseError,
    RequestLine,
    parse_request_line,
)


# --- request line -----------------------------------------------------------

def test_get_request_line():
    line, rest = parse_request_line(b"GET /page.txt HTTP/1.1\r\nHost: x\r\n")
    assert line == RequestLine(Method.GET, "page.txt", HttpVersion.HTTP_11)
    assert rest == b"\nHost: x\r\n"


def test_post_request_line_http10():
    line, _ = parse_request_line(b"POST /upload HTTP/1.0\r\n")
    assert line.method is Method.POST
    assert line.filename == "upload"
    assert line.version is HttpVersion.HTTP_10


def test_root_maps_to_index():
    line, _ = parse_request_line(b"GET / HTTP/1.1\r\n")
    assert line.filename == "index.html"


def test_query_string_is_dropped():
    line, _ = parse_request_line(b"GET /a.html?x=1&y=2 HTTP/1.1\r\n")
    assert line.filename == "a.html"


def test_incomplete_request_line():
    assert parse_request_line(b"GET /a.html HTTP/1.1") is None
    assert parse_request_line(b"") is None


def test_line_ending_at_buffer_end_leaves_nothing():
    _, rest = parse_request_line(b"GET /a HTTP/1.1\r")
    assert rest == b""


@pytest.mark.parametrize(
    "raw",
    [
        b"PUT /a HTTP/1.1\r\n",
        b"GET a HTTP/1.1\r\n",
        b"GET /a\r\n",
        b"GET /a HTTP\r\n",
        b"GET /a HTTP/1\r\n",
        b"GET /a HTTP/2.0\r\n",
    ],
)
def test_malformed_request_lines(raw):
    with pytest.raises(ParseError):
        parse_request_line(raw)


# --- headers ----------------------------------------------------------------

def test_full_header_block():
    parser = HeaderParser()
    done, rest = parser.feed(b"\nHost: example.com\r\nConnection: keep-alive\r\n\r\nBODY")
    assert done is True
    assert rest == b"BODY"
    assert parser.headers == {"Host": "example.com", "Connection": "keep-alive"}
    assert parser.state is HeaderState.END_LF


def test_block_ending_exactly_at_buffer_end():
    parser = HeaderParser()
    done, rest = parser.feed(b"Content-length: 4\r\n\r\n")
    assert done is True
    assert rest == b""
    assert parser.headers["Content-length"] == "4"


def test_split_feed_resumes_at_incomplete_line():
    parser = HeaderParser()
    done, rest = parser.feed(b"\nHost: a\r\nAcc")
    assert done is False
    assert rest == b"Acc"
    assert parser.headers == {"Host": "a"}
    done, rest = parser.feed(rest + b"ept: */*\r\n\r\nbody")
    assert done is True
    assert rest == b"body"
    assert parser.headers == {"Host": "a", "Accept": "*/*"}


def test_byte_by_byte_matches_whole_feed():
    data = b"\nHost: h\r\nContent-length: 3\r\nX-A: b c\r\n\r\nxyz"
    whole = HeaderParser()
    whole_done, whole_rest = whole.feed(data)

    parser = HeaderParser()
    pending = b""
    done = False
    for n in range(len(data)):
        pending += data[n:n + 1]
        done, pending = parser.feed(pending)
        if done:
            pending += data[n + 1:]
            break
    assert done == whole_done
    assert pending == whole_rest
    assert parser.headers == whole.headers


def test_feed_after_completion_passes_data_through():
    parser = HeaderParser()
    parser.feed(b"A: b\r\n\r\n")
    assert parser.feed(b"more") == (True, b"more")


def test_later_header_overrides_earlier():
    parser = HeaderParser()
    parser.feed(b"K: one\r\nK: two\r\n\r\n")
    assert parser.headers == {"K": "two"}


def test_reset_clears_state():
    parser = HeaderParser()
    parser.feed(b"A: b\r\n\r\n")
    parser.reset()
    assert parser.headers == {}
    assert parser.state is HeaderState.START
    done, _ = parser.feed(b"C: d\r\n\r\n")
    assert done and parser.headers == {"C": "d"}


@pytest.mark.parametrize(
    "raw",
    [
        b"Host:example\r\n\r\n",
        b"Ho\rst: x\r\n\r\n",
        b"Host: x\rY\r\n",
        b"Host: x\r\n\rY",
        b"Host: x\r\n: y\r\n\r\n",
    ],
)
def test_malformed_headers(raw):
    with pytest.raises(ParseError):
        HeaderParser().feed(raw)


def test_overlong_header_value():
    with pytest.raises(ParseError):
        HeaderParser().feed(b"X: " + b"v" * 300 + b"\r\n\r\n")


def test_long_but_allowed_value():
    value = b"v" * 200
    parser = HeaderParser()
    done, _ = parser.feed(b"X: " + value + b"\r\n\r\n")
    assert done
    assert parser.headers["X"] == value.decode()


def test_request_line_then_headers_pipeline():
    raw = b"POST /img HTTP/1.1\r\nContent-length: 5\r\nConnection: close\r\n\r\nhello"
    line, rest = parse_request_line(raw)
    parser = HeaderParser()
    done, body = parser.feed(rest)
    assert line.method is Method.POST
    assert done
    assert body == b"hello"
    assert int(parser.headers["Content-length"]) == len(body)
    assert parser.headers["Connection"] == "close"