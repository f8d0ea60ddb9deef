from planscan.api.service_client import ServiceClient
from planscan.api.stream_client import StreamClient
from planscan.api.upload_client import UploadClient

__all__ = ["ServiceClient", "StreamClient", "UploadClient"]
