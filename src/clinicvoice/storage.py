"""Publishes synthesized prompts to a public Cloud Storage bucket for <Play>."""

import logging
import random
import string
import time
from typing import Optional
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError

from clinicvoice.errors import PublishError
from clinicvoice.google_auth import GoogleAuth

logger = logging.getLogger(__name__)

UPLOAD_URL = "https://storage.googleapis.com/upload/storage/v1/b/{bucket}/o"
OBJECT_URL = "https://storage.googleapis.com/storage/v1/b/{bucket}/o/{name}"
PUBLIC_URL = "https://storage.googleapis.com/{bucket}/{name}"

_BASE36 = string.digits + string.ascii_lowercase


class AudioPublisher:
    def __init__(
        self,
        bucket: str,
        auth: GoogleAuth,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.bucket = bucket
        self.auth = auth
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        await self._client.aclose()

    @staticmethod
    def generate_file_name() -> str:
        """``audio-{epoch ms}-{random base36}.mp3``; collisions are not checked."""
        suffix = "".join(random.choices(_BASE36, k=13))
        return f"audio-{int(time.time() * 1000)}-{suffix}.mp3"

    def public_url(self, file_name: str) -> str:
        return PUBLIC_URL.format(bucket=self.bucket, name=file_name)

    async def upload(self, audio: bytes, file_name: str, content_type: str = "audio/mpeg") -> str:
        try:
            headers, params = await self.auth.build_auth(prefer_token=True)
            resp = await self._client.post(
                UPLOAD_URL.format(bucket=self.bucket),
                params={**params, "uploadType": "media", "name": file_name},
                headers={**headers, "Content-Type": content_type},
                content=audio,
            )
            resp.raise_for_status()
        except (httpx.HTTPError, GoogleAuthError, OSError, ValueError) as e:
            logger.error("Audio upload failed for %s: %s", file_name, e)
            raise PublishError(str(e)) from e

        url = self.public_url(file_name)
        logger.info("Audio file uploaded: %s", url)
        return url

    async def delete(self, file_name: str) -> bool:
        """Best effort: failures are logged and reported as False, never raised."""
        try:
            headers, params = await self.auth.build_auth(prefer_token=True)
            resp = await self._client.delete(
                OBJECT_URL.format(bucket=self.bucket, name=quote(file_name, safe="")),
                params=params,
                headers=headers,
            )
            resp.raise_for_status()
        except (httpx.HTTPError, GoogleAuthError, OSError, ValueError) as e:
            logger.error("Error deleting audio file %s: %s", file_name, e)
            return False
        logger.info("Audio file deleted: %s", file_name)
        return True
