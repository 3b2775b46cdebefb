"""
httpx bridge.

Transport wrappers that publish lifecycle signals around the wrapped
transport's handle_request / handle_async_request.

The response body is never read on the caller's behalf. A body that is not
buffered yet is copied as the caller consumes it, and the finished signal
goes out when the response is closed (after ``client.get()`` returns, or
when a ``client.stream()`` block exits).

Example:
    >>> import httpx
    >>> client = httpx.Client(transport=ActivityTransport())
    >>> async_client = httpx.AsyncClient(transport=AsyncActivityTransport())
"""

import time
import uuid
from typing import Callable, List, Optional

import httpx

from ..core.config import ActivityLoggerConfig, resolve_capture_response_body
from ..core.events import (
    LifecycleSignals,
    RequestFinished,
    RequestInfo,
    RequestStarted,
    ResponseInfo,
    default_signals,
)


def request_info_from_httpx(request: httpx.Request) -> RequestInfo:
    """RequestInfo for an httpx request (unread streaming bodies are skipped)."""
    try:
        body = request.content or None
    except httpx.RequestNotRead:
        body = None

    return RequestInfo(
        method=request.method,
        url=str(request.url),
        headers=dict(request.headers),
        body=body
    )


def _response_info(response: httpx.Response, body: Optional[bytes]) -> ResponseInfo:
    return ResponseInfo(response.status_code, dict(response.headers), body)


class _BodyCopy:
    """Bytes seen by the caller; reports once, on close."""

    def __init__(self, on_close: Callable[[Optional[bytes], Optional[Exception]], None]):
        self._on_close = on_close
        self.chunks: List[bytes] = []
        self.error: Optional[Exception] = None
        self._reported = False

    def report(self) -> None:
        if self._reported:
            return
        self._reported = True
        if self.error is not None:
            self._on_close(None, self.error)
        else:
            self._on_close(b"".join(self.chunks), None)


class _CopyingStream(httpx.SyncByteStream):
    def __init__(self, stream: httpx.SyncByteStream, copy: _BodyCopy):
        self._stream = stream
        self._copy = copy

    def __iter__(self):
        try:
            for chunk in self._stream:
                self._copy.chunks.append(chunk)
                yield chunk
        except Exception as e:
            self._copy.error = e
            raise

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            self._copy.report()


class _AsyncCopyingStream(httpx.AsyncByteStream):
    def __init__(self, stream: httpx.AsyncByteStream, copy: _BodyCopy):
        self._stream = stream
        self._copy = copy

    async def __aiter__(self):
        try:
            async for chunk in self._stream:
                self._copy.chunks.append(chunk)
                yield chunk
        except Exception as e:
            self._copy.error = e
            raise

    async def aclose(self) -> None:
        try:
            await self._stream.aclose()
        finally:
            self._copy.report()


class _ActivityTransportBase:
    def __init__(
        self,
        signals: Optional[LifecycleSignals],
        capture_response_body: Optional[bool],
        config: Optional[ActivityLoggerConfig]
    ):
        self.signals = signals if signals is not None else default_signals
        self.capture_response_body = resolve_capture_response_body(capture_response_body, config)

    def _started(self, request: httpx.Request):
        request_id = uuid.uuid4().hex
        info = request_info_from_httpx(request)
        started = time.monotonic()
        self.signals.publish_started(RequestStarted(request_id, info, timestamp=started))
        return request_id, info, started

    def _finished(self, request_id, info, started, response=None, error=None) -> None:
        finished = time.monotonic()
        self.signals.publish_finished(RequestFinished(
            request_id,
            info,
            response=response,
            error=error,
            timestamp=finished,
            elapsed=finished - started
        ))

    def _copy_for(self, response: httpx.Response, request_id, info, started) -> Optional[_BodyCopy]:
        """
        Publish now when nothing is left to capture; otherwise return the
        copy that publishes on close.
        """
        if not self.capture_response_body:
            self._finished(request_id, info, started, response=_response_info(response, None))
            return None

        if response.is_closed:
            # Built from bytes: httpx buffered the body already
            try:
                body = response.content
            except httpx.ResponseNotRead:
                body = None
            self._finished(request_id, info, started, response=_response_info(response, body))
            return None

        def on_close(body: Optional[bytes], error: Optional[Exception]) -> None:
            if error is not None:
                self._finished(request_id, info, started, error=error)
            else:
                self._finished(request_id, info, started, response=_response_info(response, body))

        return _BodyCopy(on_close)


class ActivityTransport(_ActivityTransportBase, httpx.BaseTransport):
    """
    Sync transport wrapper.

    Args:
        transport: Transport doing the real work (default: httpx.HTTPTransport())
        signals: Hub to publish to (default: default_signals)
        capture_response_body: Copy the body the caller reads into the
                               finished event (default: from config, else True)
        config: Activity logger config supplying capture_response_body
    """

    def __init__(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        signals: Optional[LifecycleSignals] = None,
        capture_response_body: Optional[bool] = None,
        config: Optional[ActivityLoggerConfig] = None
    ):
        super().__init__(signals, capture_response_body, config)
        self._transport = transport if transport is not None else httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        request_id, info, started = self._started(request)

        try:
            response = self._transport.handle_request(request)
        except Exception as e:
            self._finished(request_id, info, started, error=e)
            raise

        copy = self._copy_for(response, request_id, info, started)
        if copy is not None:
            response.stream = _CopyingStream(response.stream, copy)
        return response

    def close(self) -> None:
        self._transport.close()


class AsyncActivityTransport(_ActivityTransportBase, httpx.AsyncBaseTransport):
    """Async counterpart of ActivityTransport."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        signals: Optional[LifecycleSignals] = None,
        capture_response_body: Optional[bool] = None,
        config: Optional[ActivityLoggerConfig] = None
    ):
        super().__init__(signals, capture_response_body, config)
        self._transport = transport if transport is not None else httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        request_id, info, started = self._started(request)

        try:
            response = await self._transport.handle_async_request(request)
        except Exception as e:
            self._finished(request_id, info, started, error=e)
            raise

        copy = self._copy_for(response, request_id, info, started)
        if copy is not None:
            response.stream = _AsyncCopyingStream(response.stream, copy)
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()
