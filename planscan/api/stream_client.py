"""Page processing over a POST request whose response is an event stream."""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing

import httpx

from planscan.api.exceptions import (
    ApiError,
    ApiProtocolError,
    ProcessingCancelledError,
    StreamError,
    StreamLivenessError,
)
from planscan.api.http import ensure_success, transport_error
from planscan.api.models import ProcessingResult, ProcessPageRequest, ProgressEvent
from planscan.api.validator import build_processing_result, build_progress_event
from planscan.logging.logger import Log
from planscan.streaming.cancellation import CancellationToken
from planscan.streaming.frame_parser import (
    EVENT_ERROR,
    EVENT_PROGRESS,
    EVENT_RESULT,
    FrameParser,
    StreamEvent,
)

ProgressCallback = Callable[[ProgressEvent], None]
ErrorCallback = Callable[[str], None]


class StreamClient:
    """Runs one processing request and decodes its streamed progress and result."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        idle_timeout_seconds: float,
        connect_timeout_seconds: float = 60.0,
    ) -> None:
        self._http = http_client
        self._idle_timeout = idle_timeout_seconds
        # Reads are bounded by the idle timeout below, not by httpx.
        self._timeout = httpx.Timeout(connect_timeout_seconds, read=None)

    async def process(
        self,
        request: ProcessPageRequest,
        on_progress: ProgressCallback,
        on_error: ErrorCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ProcessingResult:
        """Process a page, reporting progress until the run settles.

        Returns the result carried by the ``result`` event. Every failure
        except cancellation is also reported through ``on_error`` before it
        is raised.

        Raises:
            ApiTransportError, ApiResponseError: if the request cannot start.
            StreamError: if the server sends an ``error`` event.
            StreamLivenessError: if the stream ends or stalls without a result.
            ProcessingCancelledError: if ``cancel_token`` is cancelled.
        """
        try:
            async with aclosing(self.events(request, cancel_token)) as events:
                async for event in events:
                    if event.type == EVENT_PROGRESS:
                        progress = self._to_progress(event)
                        if progress is not None:
                            on_progress(progress)
                    elif event.type == EVENT_RESULT:
                        result = build_processing_result(event.data)
                        Log.info(
                            f"Page {result.page_number} of {result.file_id} processed "
                            f"in {result.processing_time_seconds:.1f}s"
                        )
                        return result
                    elif event.type == EVENT_ERROR:
                        raise StreamError(str(event.data.get("error") or "Processing failed"))
                    else:
                        Log.debug(f"Ignoring '{event.type}' event")
        except ProcessingCancelledError:
            Log.info(f"Processing of page {request.page_number} cancelled")
            raise
        except ApiError as exc:
            Log.error(f"Processing of page {request.page_number} failed: {exc}")
            if on_error is not None:
                on_error(str(exc))
            raise
        raise StreamLivenessError("Stream ended before a result was received")

    async def events(
        self,
        request: ProcessPageRequest,
        cancel_token: CancellationToken | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Yield decoded events in arrival order, stopping after the first terminal one."""
        token = cancel_token or CancellationToken()
        parser = FrameParser()
        Log.info(
            f"Processing page {request.page_number} of {request.file_id} "
            f"with model '{request.model_type}'"
        )
        try:
            async with self._http.stream(
                "POST",
                "/process-page-stream",
                json=request.to_payload(),
                timeout=self._timeout,
            ) as response:
                await ensure_success(response, "Failed to start processing")
                chunks = response.aiter_bytes()
                while True:
                    chunk = await self._next_chunk(chunks, token)
                    if chunk is None:
                        parser.close()
                        raise StreamLivenessError("Stream ended before a result was received")
                    parser.feed(chunk)
                    while (event := parser.next_event()) is not None:
                        if token.cancelled:
                            raise ProcessingCancelledError("Processing was cancelled")
                        Log.debug(f"Received '{event.type}' event")
                        yield event
                        if event.is_terminal:
                            return
        except httpx.TransportError as exc:
            raise transport_error(exc) from exc

    async def _next_chunk(
        self,
        chunks: AsyncIterator[bytes],
        token: CancellationToken,
    ) -> bytes | None:
        """Wait for the next chunk, racing it against cancellation and the idle timeout."""
        if token.cancelled:
            raise ProcessingCancelledError("Processing was cancelled")
        read = asyncio.ensure_future(_read_next(chunks))
        cancelled = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait(
                {read, cancelled},
                timeout=self._idle_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not read.done():
                read.cancel()
        if read in done:
            return read.result()
        if cancelled in done:
            raise ProcessingCancelledError("Processing was cancelled")
        raise StreamLivenessError(f"No data received for {self._idle_timeout:g} seconds")

    @staticmethod
    def _to_progress(event: StreamEvent) -> ProgressEvent | None:
        try:
            return build_progress_event(event.data)
        except ApiProtocolError as exc:
            Log.warning(f"Dropping malformed progress event: {exc}")
            return None


async def _read_next(chunks: AsyncIterator[bytes]) -> bytes | None:
    return await anext(chunks, None)
