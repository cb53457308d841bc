import logging
from typing import Optional

import httpx

from config.settings import settings
from services.exceptions import StorageError

logger = logging.getLogger(__name__)


class StorageClient:
    """
    Minimal object-storage client (Supabase Storage compatible REST API).

    PUT/POST {STORAGE_URL}/storage/v1/object/{bucket}/{path}
    public:  {STORAGE_URL}/storage/v1/object/public/{bucket}/{path}
    """

    def __init__(self, base_url: Optional[str] = None, service_key: Optional[str] = None,
                 bucket: Optional[str] = None, timeout: Optional[int] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        base_url = base_url if base_url is not None else settings.STORAGE_URL
        self.base = (base_url or "").rstrip("/")
        self.service_key = service_key if service_key is not None else settings.STORAGE_SERVICE_KEY
        self.bucket = bucket or settings.STORAGE_BUCKET
        self.timeout = timeout or settings.STORAGE_TIMEOUT
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.base)

    @property
    def headers(self) -> dict:
        headers = {"x-upsert": "true"}
        if self.service_key:
            headers["Authorization"] = f"Bearer {self.service_key}"
            headers["apikey"] = self.service_key
        return headers

    def public_url(self, path: str) -> str:
        return f"{self.base}/storage/v1/object/public/{self.bucket}/{path}"

    def upload(self, path: str, data: bytes, content_type: str = "image/png") -> str:
        url = f"{self.base}/storage/v1/object/{self.bucket}/{path}"
        headers = {**self.headers, "Content-Type": content_type}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.post(url, content=data, headers=headers)
                r.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Storage upload failed: path=%s error=%s", path, e)
            raise StorageError("Failed to upload QR code") from e
        return self.public_url(path)


def qr_image_path(uid: str, day: int) -> str:
    return f"{uid}/day{day}.png"


def get_storage() -> StorageClient:
    return StorageClient()
