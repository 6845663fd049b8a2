# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for the callback entry point and cooperative cancellation."""

import threading

import httpx
import pytest

from tether import Failure, HTTPMethod, PendingCall, Success
from tether.errors import (
    CancelledError,
    EncodeError,
    StatusCodeError,
    TetherError,
    TransportError,
)

from .conftest import make_transport
from .sample_apis import CreateNoteRequest, DeleteNoteRequest, Note, NotesAPI


def collect(api, request, **kwargs):
    results = []
    call = api.submit(request, results.append, **kwargs)
    assert call.wait(5), "callback never ran"
    return call, results


class TestExecute:
    def test_success(self, server, transport):
        server.reply(201, {"id": 1, "title": "milk"})
        result = NotesAPI(transport=transport).execute(CreateNoteRequest(title="milk"))

        assert isinstance(result, Success)
        assert result.ok
        assert result.unwrap() == Note(id=1, title="milk")

    def test_failure_carries_the_error(self, server, transport):
        server.reply(500, {"error": "boom"})
        result = NotesAPI(transport=transport).execute(DeleteNoteRequest(id=1))

        assert isinstance(result, Failure)
        assert not result.ok
        assert isinstance(result.error, StatusCodeError)
        with pytest.raises(StatusCodeError):
            result.unwrap()

    def test_cancelled_before_dispatch_sends_nothing(self, server, transport):
        call = PendingCall(lambda c: None)
        call.cancel()

        result = NotesAPI(transport=transport).execute(DeleteNoteRequest(id=1), call=call)

        assert isinstance(result.error, CancelledError)
        assert result.error.code == "cancelled"
        assert result.error.context == {"request": "DeleteNoteRequest"}
        assert server.requests == []


class TestSubmit:
    def test_callback_receives_success(self, server, transport):
        server.reply(201, {"id": 4, "title": "bread"})
        call, results = collect(NotesAPI(transport=transport), CreateNoteRequest(title="bread"))

        assert call.done()
        assert results == [Success(Note(id=4, title="bread"))]

    def test_callback_receives_failure(self, server, transport):
        server.fail_with(httpx.ConnectError("down"))
        _, results = collect(NotesAPI(transport=transport), DeleteNoteRequest(id=1))

        [result] = results
        assert isinstance(result.error, TransportError)

    def test_callback_runs_exactly_once(self, server, transport):
        server.reply(204, content=b"")
        api = NotesAPI(transport=transport)
        received = {i: [] for i in range(5)}
        calls = [api.submit(DeleteNoteRequest(id=i), received[i].append) for i in range(5)]

        assert all(call.wait(5) for call in calls)
        assert len(server.requests) == 5
        assert all(len(results) == 1 for results in received.values())
        assert all(results[0].ok for results in received.values())

    def test_unencodable_header_reaches_callback(self, server, transport):
        _, results = collect(
            NotesAPI(transport=transport), DeleteNoteRequest(id=1), headers={"X-Name": "café"}
        )

        [result] = results
        assert isinstance(result.error, EncodeError)
        assert isinstance(result.error.get_cause(), UnicodeEncodeError)
        assert server.requests == []

    def test_foreign_transport_error_reaches_callback(self):
        class BrokenTransport:
            def send(self, request):
                raise OSError("socket gone")

            async def asend(self, request):
                raise OSError("socket gone")

        _, results = collect(NotesAPI(transport=BrokenTransport()), DeleteNoteRequest(id=1))

        [result] = results
        assert isinstance(result.error, TransportError)
        assert isinstance(result.error.get_cause(), OSError)
        assert result.error.context["method"] == "DELETE"

    def test_unexpected_error_still_reaches_callback(self, server, transport):
        class Unloadable:
            pass

        class OddRequest(DeleteNoteRequest, kw_only=True):
            method = HTTPMethod.GET
            response_type = Unloadable

        server.reply(200, {})
        _, results = collect(NotesAPI(transport=transport), OddRequest(id=1))

        [result] = results
        assert type(result.error) is TetherError
        assert isinstance(result.error.get_cause(), TypeError)

    def test_cancel_while_in_flight_reports_cancellation(self):
        entered = threading.Event()
        release = threading.Event()

        def slow_handler(request):
            entered.set()
            release.wait(5)
            return httpx.Response(201, json={"id": 9, "title": "late"})

        transport = make_transport(slow_handler)
        try:
            results = []
            call = NotesAPI(transport=transport).submit(
                CreateNoteRequest(title="late"), results.append
            )
            assert entered.wait(5)
            call.cancel()
            release.set()
            assert call.wait(5)
        finally:
            transport.close()

        [result] = results
        assert call.cancelled
        assert isinstance(result.error, CancelledError)
        assert result.error.message == "Cancelled after response"

    def test_wait_times_out_while_running(self):
        release = threading.Event()

        def blocked(call):
            release.wait(5)

        call = PendingCall(blocked).start()
        try:
            assert call.wait(0.01) is False
            assert not call.done()
        finally:
            release.set()
        assert call.wait(5)
