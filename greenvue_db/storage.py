from __future__ import annotations

import logging

from greenvue_db.http import ApiHttpError, HttpClient, TransportError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"

_CONTENT_TYPES = {
    ".png": "image/png",
    ".webp": "image/webp",
}


def content_type_for(filename: str) -> str:
    lowered = filename.lower()
    for suffix, content_type in _CONTENT_TYPES.items():
        if lowered.endswith(suffix):
            return content_type
    return DEFAULT_CONTENT_TYPE


class StorageApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def object_url(self, bucket: str, filename: str) -> str:
        return self._http_client.url(f"/storage/v1/object/{bucket}/{filename}")

    def upload_image(self, filename: str, bucket: str, image: bytes) -> bytes:
        url = self.object_url(bucket, filename)
        content_type = content_type_for(filename)
        logger.info("Uploading to URL: %s", url)
        logger.info("Using content type: %s", content_type)

        try:
            response = self._http_client.send(
                "POST",
                url,
                data=image,
                headers={"Content-Type": content_type},
            )
        except TransportError as exc:
            logger.error("Error sending request: %s", exc)
            raise

        logger.info("Status code: %d", response.status_code)
        if response.status_code >= 400:
            logger.error("Error response: %s", response.text)
            raise ApiHttpError(
                response.status_code,
                response.text,
                message=f"supabase storage error ({response.status_code}): {response.text}",
            )
        return response.content
