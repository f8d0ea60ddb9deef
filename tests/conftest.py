import io
import json
from collections.abc import AsyncIterator, Callable, Iterable
from typing import Any

import httpx
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

BASE_URL = "http://testserver/api/v1"


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Fire alarm riser diagram")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Level 1 floor plan")
    c.showPage()
    c.drawString(72, 720, "Level 2 floor plan")
    c.save()
    return buf.getvalue()


def sse_frame(event: str, data: dict[str, Any]) -> bytes:
    """Encode one event frame the way the processing endpoint emits it."""
    return f"event: {event}\ndata: {json.dumps(data)}\n\n".encode()


def result_payload(page_number: int = 1, file_id: str = "f1") -> dict[str, Any]:
    return {
        "file_id": file_id,
        "page_number": page_number,
        "total_tiles_processed": 4,
        "processing_time_seconds": 12.5,
        "yolo_results": {
            "total_detections": 3,
            "detections_by_class": {"smoke_detector": 2, "pull_station": 1},
            "confidence_stats": {"mean": 0.81, "min": 0.62, "max": 0.97},
        },
        "gemini_analysis": {"formatted_output": "Three fire alarm devices found."},
        "status": "completed",
    }


async def iter_chunks(
    chunks: Iterable[bytes],
    consumed: list[bytes] | None = None,
) -> AsyncIterator[bytes]:
    """Serve chunks as a response body, recording each one handed to the reader."""
    for chunk in chunks:
        if consumed is not None:
            consumed.append(chunk)
        yield chunk


@pytest.fixture()
def make_http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by the given handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    return _make
