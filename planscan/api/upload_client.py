import httpx

from planscan.api.http import ensure_success, json_body, transport_error
from planscan.api.models import PDF_MIME_TYPE, RemoteFileHandle, UploadedFile
from planscan.api.validator import build_remote_file_handle
from planscan.logging.logger import Log


class UploadClient:
    """Exchanges a whole file for a server-assigned identifier in one request."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def upload(self, file: UploadedFile) -> RemoteFileHandle:
        """Upload a file as multipart form data.

        Raises:
            ApiTransportError: if the request never completes.
            ApiResponseError: on a non-success status, with the server detail if any.
            ApiProtocolError: if the response body is not a valid upload response.
        """
        Log.info(f"Uploading {file.name} ({file.size_bytes} bytes)")
        try:
            response = await self._http.post(
                "/upload",
                files={"file": (file.name, file.content, file.mime_type or PDF_MIME_TYPE)},
            )
        except httpx.TransportError as exc:
            raise transport_error(exc) from exc
        await ensure_success(response, "Failed to upload PDF")
        handle = build_remote_file_handle(json_body(response))
        Log.info(f"Uploaded {file.name} as {handle.file_id} ({handle.total_pages} pages)")
        return handle
