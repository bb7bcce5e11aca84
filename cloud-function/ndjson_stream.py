"""
Newline-delimited JSON progress streaming.

Long-running operations report progress as one JSON event per line:
    {"type": "progress", "completed": 3, "total": 10, "phase": "updating"}
    {"type": "done", "data": {...}}
    {"type": "error", "error": "...", "completed": 3, "total": 10}
Exactly one terminal event (done or error) ends a stream.
"""

import codecs
import json
import logging
import queue
import threading
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

import requests

from errors import ProtocolError, StreamAborted, StreamOperationError

logger = logging.getLogger(__name__)

NDJSON_CONTENT_TYPE = 'application/x-ndjson'

NDJSON_HEADERS = {
    'Content-Type': NDJSON_CONTENT_TYPE,
    'Cache-Control': 'no-cache',
    'X-Accel-Buffering': 'no',
}

TERMINAL_EVENT_TYPES = ('done', 'error')

Event = Dict[str, Any]
ProgressCallback = Callable[[int, int, Optional[str]], None]

_END_OF_STREAM = object()


def encode_event(event: Event) -> bytes:
    return (json.dumps(event, ensure_ascii=False) + '\n').encode('utf-8')


class NdjsonWriter:
    """
    Producer side. Thread-safe: workers call progress()/done()/error() while
    the HTTP response iterates lines().
    """

    def __init__(self):
        self._queue: 'queue.Queue[Any]' = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _enqueue(self, event: Event, terminal: bool = False) -> bool:
        with self._lock:
            if self._closed:
                logger.debug(f"Ignoring {event.get('type')} event written after stream close")
                return False
            self._queue.put(encode_event(event))
            if terminal:
                self._closed = True
                self._queue.put(_END_OF_STREAM)
        return True

    def progress(self, completed: int, total: int, phase: Optional[str] = None) -> bool:
        event: Event = {'type': 'progress', 'completed': completed, 'total': total}
        if phase:
            event['phase'] = phase
        return self._enqueue(event)

    def done(self, data: Any) -> bool:
        return self._enqueue({'type': 'done', 'data': data}, terminal=True)

    def error(self, message: str, completed: Optional[int] = None, total: Optional[int] = None) -> bool:
        event: Event = {'type': 'error', 'error': message}
        if completed is not None:
            event['completed'] = completed
        if total is not None:
            event['total'] = total
        return self._enqueue(event, terminal=True)

    def close(self) -> None:
        """End the stream without a terminal event (the consumer will see a premature close)"""
        with self._lock:
            if not self._closed:
                self._closed = True
                self._queue.put(_END_OF_STREAM)

    def lines(self) -> Iterator[bytes]:
        """Yield encoded events until the stream is closed"""
        while True:
            line = self._queue.get()
            if line is _END_OF_STREAM:
                return
            yield line


class NdjsonConsumer:
    """
    Consumer side. Feed raw chunks as they arrive; chunk boundaries may split
    lines and multi-byte UTF-8 characters.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder('utf-8')()
        self._buffer = ''
        self.terminal: Optional[Event] = None
        self.aborted = False

    def feed(self, chunk: Union[bytes, str]) -> List[Event]:
        """
        Decode a chunk and return the complete events it finished.

        Raises:
            StreamAborted: If abort() was called
            ProtocolError: On a line that is not a JSON object
        """
        if self.aborted:
            raise StreamAborted("Stream was aborted")

        self._buffer += chunk if isinstance(chunk, str) else self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split('\n')
        return self._parse_lines(lines)

    def finish(self) -> Event:
        """
        Flush the trailing partial line at end of input.

        Returns:
            The terminal event

        Raises:
            ProtocolError: If the stream closed without a done or error event
        """
        if self.aborted:
            raise StreamAborted("Stream was aborted")

        self._buffer += self._decoder.decode(b'', final=True)
        trailing, self._buffer = self._buffer, ''
        self._parse_lines([trailing])

        if self.terminal is None:
            raise ProtocolError("Stream ended unexpectedly")
        return self.terminal

    def abort(self) -> None:
        self.aborted = True
        self._buffer = ''

    def _parse_lines(self, lines: List[str]) -> List[Event]:
        events: List[Event] = []
        for line in lines:
            line = line.strip()
            if not line or self.terminal is not None:
                continue
            try:
                event = json.loads(line)
            except ValueError as e:
                raise ProtocolError(f"Malformed stream event: {line[:100]}") from e
            if not isinstance(event, dict) or 'type' not in event:
                raise ProtocolError(f"Malformed stream event: {line[:100]}")

            events.append(event)
            if event['type'] in TERMINAL_EVENT_TYPES:
                self.terminal = event
        return events


def _raise_for_error_event(event: Event) -> None:
    raise StreamOperationError(
        event.get('error') or 'Operation failed',
        completed=event.get('completed'),
        total=event.get('total'),
    )


def consume_stream(
    chunks: Iterable[Union[bytes, str]],
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Any:
    """
    Consume an event stream to completion.

    Args:
        chunks: Raw byte (or text) chunks in arrival order
        on_progress: Called with (completed, total, phase) for each progress event
        cancel_event: Set to abort; no callbacks fire after that

    Returns:
        The data of the done event

    Raises:
        StreamOperationError: On an error event
        ProtocolError: On malformed input or a stream closed before its terminal event
        StreamAborted: If cancelled
    """
    consumer = NdjsonConsumer()

    def cancelled() -> bool:
        if cancel_event is not None and cancel_event.is_set():
            consumer.abort()
            return True
        return False

    for chunk in chunks:
        if cancelled():
            raise StreamAborted("Stream was aborted")

        for event in consumer.feed(chunk):
            if event['type'] == 'progress':
                if cancelled():
                    raise StreamAborted("Stream was aborted")
                if on_progress:
                    on_progress(event.get('completed', 0), event.get('total', 0), event.get('phase'))
            elif event['type'] == 'done':
                return event.get('data')
            elif event['type'] == 'error':
                _raise_for_error_event(event)
            else:
                logger.debug(f"Ignoring unknown stream event type {event['type']}")

    if cancelled():
        raise StreamAborted("Stream was aborted")

    terminal = consumer.finish()
    if terminal['type'] == 'error':
        _raise_for_error_event(terminal)
    return terminal.get('data')


def read_response(
    response: requests.Response,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Any:
    """
    Read a response that is either an event stream or an ordinary JSON body.
    Early failures (validation, auth) arrive as ordinary JSON with a non-2xx status.
    """
    content_type = response.headers.get('Content-Type', '')

    if NDJSON_CONTENT_TYPE not in content_type:
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get('error') if isinstance(body, dict) else None
            raise StreamOperationError(message or f"Request failed with status {response.status_code}")
        return response.json()

    try:
        return consume_stream(response.iter_content(chunk_size=None), on_progress, cancel_event)
    finally:
        response.close()


class StreamingMutation:
    """
    Client for endpoints that stream progress.

    Tracks is_pending, progress, error and data for the latest call. Starting a
    new mutate() aborts the one in flight.
    """

    def __init__(self, session: Optional[requests.Session] = None, on_progress: Optional[ProgressCallback] = None):
        self.session = session or requests.Session()
        self.on_progress = on_progress
        self._lock = threading.Lock()
        self._cancel_event: Optional[threading.Event] = None
        self._clear_state()

    def _clear_state(self) -> None:
        self.is_pending = False
        self.progress: Optional[Dict[str, Any]] = None
        self.error: Optional[Exception] = None
        self.data: Any = None

    def mutate(self, url: str, method: str = 'POST', **kwargs) -> Any:
        """
        Send the request and follow its progress stream.

        Extra keyword arguments are passed to requests (json=, params=, ...).

        Returns:
            The final result data
        """
        cancel_event = threading.Event()
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
            self._cancel_event = cancel_event
            self._clear_state()
            self.is_pending = True

        headers = dict(kwargs.pop('headers', None) or {})
        headers.setdefault('Accept', NDJSON_CONTENT_TYPE)

        def track(completed: int, total: int, phase: Optional[str]) -> None:
            with self._lock:
                if cancel_event is not self._cancel_event:
                    return
                self.progress = {'completed': completed, 'total': total, 'phase': phase}
            if self.on_progress:
                self.on_progress(completed, total, phase)

        try:
            response = self.session.request(method, url, headers=headers, stream=True, **kwargs)
            data = read_response(response, on_progress=track, cancel_event=cancel_event)
        except StreamAborted:
            raise
        except (StreamOperationError, ProtocolError, requests.RequestException, ValueError) as e:
            self._finish(cancel_event, error=e)
            raise

        self._finish(cancel_event, data=data)
        return data

    def _finish(self, cancel_event: threading.Event, data: Any = None, error: Optional[Exception] = None) -> None:
        with self._lock:
            # A superseded call must not overwrite the newer call's state
            if cancel_event is not self._cancel_event:
                return
            self.is_pending = False
            self.progress = None
            self.error = error
            self.data = data

    def reset(self) -> None:
        """Abort any call in flight and clear state"""
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
                self._cancel_event = None
            self._clear_state()
