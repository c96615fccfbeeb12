"""Google Cloud credentials for the REST APIs (Text-to-Speech, Cloud Storage).

An API key is enough for Text-to-Speech; Cloud Storage writes need an OAuth
token from a service account file.
"""

import asyncio
import logging
from typing import Optional

from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


class GoogleAuth:
    def __init__(
        self,
        api_key: str = "",
        credentials_path: str = "",
        scopes: tuple[str, ...] = (CLOUD_PLATFORM_SCOPE,),
    ):
        self.api_key = api_key
        self.credentials_path = credentials_path
        self.scopes = scopes
        self._credentials: Optional[service_account.Credentials] = None
        self._lock = asyncio.Lock()

    async def build_auth(self, prefer_token: bool = False) -> tuple[dict, dict]:
        """Return (headers, query params) for a request.

        ``prefer_token`` skips the API key for endpoints that reject keys.
        """
        if self.api_key and not (prefer_token and self.credentials_path):
            return {}, {"key": self.api_key}
        if self.credentials_path:
            token = await self.access_token()
            return {"Authorization": f"Bearer {token}"}, {}
        logger.warning("No Google credentials configured")
        return {}, {}

    async def access_token(self) -> str:
        async with self._lock:
            if self._credentials is None:
                self._credentials = service_account.Credentials.from_service_account_file(
                    self.credentials_path,
                    scopes=list(self.scopes),
                )
            if not self._credentials.valid:
                await asyncio.to_thread(self._credentials.refresh, GoogleAuthRequest())
            return self._credentials.token
