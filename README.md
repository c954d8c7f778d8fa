# reactorhttp

Building blocks for a small event-driven HTTP/1.x server: an incremental
request parser, a suffix-to-content-type table, a bounded pool of worker
threads and a heap of deadlines for idle connections. It needs nothing
beyond the standard library.

## Installing

```
pip install .
```

Add the `test` extra to run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `reactorhttp.httpparse`

- `parse_request_line(buffer)` parses the request line at the start of a
  `bytes` buffer. It returns `None` until a carriage return has arrived, and
  otherwise a `(RequestLine, rest)` pair. `RequestLine` holds `method`
  (`Method.GET` or `Method.POST`), `filename` and `version`
  (`HttpVersion.HTTP_10` or `HttpVersion.HTTP_11`). A target of `/` gives the
  filename `index.html`, and a query string is cut off.
- `HeaderParser` reads `Key: value` lines up to the blank line that ends the
  header block. `feed(buffer)` returns `(True, rest)` once the block is
  complete and `(False, rest)` when more data is needed; hand `rest` back,
  with the new data appended, on the next call. Headers collect in
  `headers`, and `reset()` starts over. Values are limited to 256 bytes.

Both raise `ParseError` (a `ValueError`) on malformed input.

```python
from reactorhttp.httpparse import HeaderParser, parse_request_line

line, rest = parse_request_line(b"GET /a.png?x=1 HTTP/1.1\r\nHost: h\r\n\r\n")
parser = HeaderParser()
done, body = parser.feed(rest)
# line.filename == "a.png", done is True, parser.headers == {"Host": "h"}
```

### `reactorhttp.mime`

`mime_type(suffix)` maps a suffix such as `".jpg"` to its content type and
falls back to `text/html`. The table is `MIME_TYPES`.

### `reactorhttp.threadpool`

`ThreadPool(thread_count=4, queue_size=1024)` runs `function(argument)`
tasks on worker threads. Sizes outside 1–1024 threads or 1–65535 queued tasks
fall back to the defaults. `add(function, argument)` raises `QueueFullError`
when the queue is full and `PoolShutdownError` once the pool is shutting
down. `destroy(mode)` takes a `ShutdownMode`: `GRACEFUL` runs the queued
tasks first, `IMMEDIATE` drops them. The pool is also a context manager that
shuts down gracefully on exit. Exceptions raised by tasks are logged.

### `reactorhttp.timer`

`TimerManager(on_expire=None, clock=None)` keeps `TimerNode` deadlines in
milliseconds. `add_timer(request, timeout_ms)` creates a node and calls
`request.link_timer(node)`. `handle_expired()` removes cancelled and expired
nodes from the front of the heap and returns the requests that expired,
passing each to `on_expire`. A node's `clear_request()` detaches its request
and cancels it; cancelled nodes are discarded lazily when they reach the
front. A custom `clock` returning milliseconds can be supplied for testing.

## What it does not do

The package has no server of its own: it opens no sockets, waits on no
readiness events, serves no files and has no command to run. The pieces above
are meant to be combined by an application that does that work.