import httpx

from planscan.api.http import ensure_success, json_body, transport_error
from planscan.api.models import (
    FileInfo,
    HealthStatus,
    ModelInfo,
    ProcessingResult,
    ProcessPageRequest,
)
from planscan.api.validator import (
    build_file_info,
    build_health_status,
    build_model_infos,
    build_processing_result,
)
from planscan.logging.logger import Log


class ServiceClient:
    """Single-shot calls to the analysis backend outside the upload/stream flow."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def process_page(self, request: ProcessPageRequest) -> ProcessingResult:
        """Process a page without progress reporting."""
        Log.info(f"Processing page {request.page_number} of {request.file_id} (non-streaming)")
        response = await self._send("POST", "/process-page", json=request.to_payload())
        await ensure_success(response, "Failed to process page")
        return build_processing_result(json_body(response))

    async def get_file_info(self, file_id: str) -> FileInfo:
        response = await self._send("GET", f"/file-info/{file_id}")
        await ensure_success(response, "Failed to get file information")
        return build_file_info(json_body(response))

    async def delete_file(self, file_id: str) -> str:
        """Delete an uploaded file and return the server confirmation message."""
        response = await self._send("DELETE", f"/file/{file_id}")
        await ensure_success(response, "Failed to delete file")
        body = json_body(response)
        message = body.get("message", "") if isinstance(body, dict) else ""
        Log.info(f"Deleted file {file_id}")
        return str(message)

    async def list_models(self) -> list[ModelInfo]:
        response = await self._send("GET", "/models")
        await ensure_success(response, "Failed to get models")
        return build_model_infos(json_body(response))

    async def health_check(self) -> HealthStatus:
        response = await self._send("GET", "/health")
        await ensure_success(response, "Health check failed")
        return build_health_status(json_body(response))

    async def _send(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        try:
            return await self._http.request(method, url, **kwargs)  # type: ignore[arg-type]
        except httpx.TransportError as exc:
            raise transport_error(exc) from exc
