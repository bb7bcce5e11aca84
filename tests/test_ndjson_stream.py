"""Tests for the NDJSON progress protocol."""

import json
import threading
from unittest.mock import Mock

import pytest

from errors import ProtocolError, StreamAborted, StreamOperationError
from ndjson_stream import (
    NDJSON_CONTENT_TYPE,
    NdjsonConsumer,
    NdjsonWriter,
    StreamingMutation,
    consume_stream,
    encode_event,
    read_response,
)


def _events(*events):
    return b''.join(encode_event(e) for e in events)


class TestWriter:
    def test_progress_then_done(self):
        writer = NdjsonWriter()
        writer.progress(1, 2, 'updating')
        writer.progress(2, 2)
        writer.done({'ok': True})

        lines = [json.loads(line) for line in writer.lines()]

        assert lines == [
            {'type': 'progress', 'completed': 1, 'total': 2, 'phase': 'updating'},
            {'type': 'progress', 'completed': 2, 'total': 2},
            {'type': 'done', 'data': {'ok': True}},
        ]

    def test_exactly_one_terminal_event(self):
        writer = NdjsonWriter()
        writer.error('boom', 1, 3)
        assert writer.done({'late': True}) is False
        assert writer.progress(2, 3) is False

        lines = [json.loads(line) for line in writer.lines()]

        assert lines == [{'type': 'error', 'error': 'boom', 'completed': 1, 'total': 3}]

    def test_lines_from_another_thread(self):
        writer = NdjsonWriter()

        def produce():
            for i in range(1, 4):
                writer.progress(i, 3)
            writer.done(None)

        thread = threading.Thread(target=produce)
        thread.start()
        lines = list(writer.lines())
        thread.join()

        assert len(lines) == 4
        assert json.loads(lines[-1]) == {'type': 'done', 'data': None}


class TestConsumer:
    def test_lines_split_across_chunks(self):
        raw = _events({'type': 'progress', 'completed': 1, 'total': 2}, {'type': 'done', 'data': [1]})
        consumer = NdjsonConsumer()

        events = []
        for i in range(0, len(raw), 5):
            events.extend(consumer.feed(raw[i:i + 5]))

        assert [e['type'] for e in events] == ['progress', 'done']
        assert consumer.finish() == {'type': 'done', 'data': [1]}

    def test_multibyte_character_split_across_chunks(self):
        raw = _events({'type': 'done', 'data': 'Côte d’Ivoire'})
        split = raw.index('ô'.encode('utf-8')) + 1
        consumer = NdjsonConsumer()

        assert consumer.feed(raw[:split]) == []
        [event] = consumer.feed(raw[split:])

        assert event['data'] == 'Côte d’Ivoire'

    def test_trailing_line_without_newline(self):
        consumer = NdjsonConsumer()
        assert consumer.feed(b'{"type": "done", "data": 5}') == []
        assert consumer.finish()['data'] == 5

    def test_events_after_terminal_ignored(self):
        consumer = NdjsonConsumer()
        events = consumer.feed(_events({'type': 'done', 'data': 1}, {'type': 'progress', 'completed': 9, 'total': 9}))
        assert events == [{'type': 'done', 'data': 1}]

    def test_premature_close(self):
        consumer = NdjsonConsumer()
        consumer.feed(_events({'type': 'progress', 'completed': 1, 'total': 2}))
        with pytest.raises(ProtocolError, match="Stream ended unexpectedly"):
            consumer.finish()

    def test_malformed_line(self):
        with pytest.raises(ProtocolError):
            NdjsonConsumer().feed(b'{"type": "progress", \n')

    def test_abort(self):
        consumer = NdjsonConsumer()
        consumer.abort()
        with pytest.raises(StreamAborted):
            consumer.feed(_events({'type': 'done', 'data': 1}))


class TestConsumeStream:
    def test_returns_done_data_and_reports_progress(self):
        on_progress = Mock()
        chunks = [_events({'type': 'progress', 'completed': 1, 'total': 2, 'phase': 'updating'}),
                  _events({'type': 'progress', 'completed': 2, 'total': 2}),
                  _events({'type': 'done', 'data': {'successful': 2}})]

        assert consume_stream(chunks, on_progress) == {'successful': 2}
        assert [c.args for c in on_progress.call_args_list] == [(1, 2, 'updating'), (2, 2, None)]

    def test_error_event_raises(self):
        chunks = [_events({'type': 'error', 'error': 'quota exceeded', 'completed': 3, 'total': 10})]

        with pytest.raises(StreamOperationError) as exc_info:
            consume_stream(chunks)

        assert str(exc_info.value) == 'quota exceeded'
        assert exc_info.value.completed == 3
        assert exc_info.value.total == 10

    def test_closed_without_terminal(self):
        with pytest.raises(ProtocolError):
            consume_stream([_events({'type': 'progress', 'completed': 1, 'total': 2})])

    def test_cancel_stops_callbacks(self):
        cancel = threading.Event()
        seen = []

        def on_progress(completed, total, phase):
            seen.append(completed)
            cancel.set()

        chunks = [_events({'type': 'progress', 'completed': 1, 'total': 3},
                          {'type': 'progress', 'completed': 2, 'total': 3}),
                  _events({'type': 'done', 'data': None})]

        with pytest.raises(StreamAborted):
            consume_stream(chunks, on_progress, cancel)
        assert seen == [1]


def _http_response(status=200, content_type='application/json', body=None, chunks=None):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.headers = {'Content-Type': content_type}
    if body is not None:
        response.json.return_value = body
    else:
        response.json.side_effect = ValueError("no body")
    response.iter_content.return_value = iter(chunks or [])
    return response


class TestReadResponse:
    def test_plain_json_body(self):
        assert read_response(_http_response(body={'successful': 1})) == {'successful': 1}

    def test_plain_error_body(self):
        with pytest.raises(StreamOperationError, match='Invalid request body'):
            read_response(_http_response(status=400, body={'error': 'Invalid request body'}))

    def test_error_without_body(self):
        with pytest.raises(StreamOperationError, match='status 502'):
            read_response(_http_response(status=502))

    def test_ndjson_body(self):
        response = _http_response(content_type=NDJSON_CONTENT_TYPE,
                                  chunks=[_events({'type': 'done', 'data': 7})])
        assert read_response(response) == 7
        response.close.assert_called_once()


class TestStreamingMutation:
    def test_tracks_state(self):
        session = Mock()
        session.request.return_value = _http_response(
            content_type=NDJSON_CONTENT_TYPE,
            chunks=[_events({'type': 'progress', 'completed': 1, 'total': 1}, {'type': 'done', 'data': 'ok'})],
        )
        mutation = StreamingMutation(session=session)

        assert mutation.mutate('http://localhost/bulk', json={'items': []}) == 'ok'

        assert mutation.is_pending is False
        assert mutation.data == 'ok'
        assert mutation.error is None
        _, kwargs = session.request.call_args
        assert kwargs['headers']['Accept'] == NDJSON_CONTENT_TYPE
        assert kwargs['stream'] is True

    def test_records_error(self):
        session = Mock()
        session.request.return_value = _http_response(
            content_type=NDJSON_CONTENT_TYPE, chunks=[_events({'type': 'error', 'error': 'nope'})],
        )
        mutation = StreamingMutation(session=session)

        with pytest.raises(StreamOperationError):
            mutation.mutate('http://localhost/bulk')

        assert mutation.is_pending is False
        assert str(mutation.error) == 'nope'

    def test_reset_clears_state(self):
        session = Mock()
        session.request.return_value = _http_response(body={'done': True})
        mutation = StreamingMutation(session=session)
        mutation.mutate('http://localhost/bulk')

        mutation.reset()

        assert mutation.data is None
        assert mutation.is_pending is False
