"""Google Cloud Text-to-Speech over REST."""

import base64
import binascii
import logging
from dataclasses import dataclass, replace
from typing import Optional

import httpx
from google.auth.exceptions import GoogleAuthError

from clinicvoice.errors import SynthesisError
from clinicvoice.google_auth import GoogleAuth

logger = logging.getLogger(__name__)

TTS_BASE_URL = "https://texttospeech.googleapis.com/v1"


@dataclass(frozen=True)
class VoiceSettings:
    language_code: str = "es-US"
    voice_name: str = "es-US-Neural2-A"
    gender: str = "FEMALE"
    speaking_rate: float = 1.0
    pitch: float = 0.0
    volume_gain_db: float = 0.0
    audio_encoding: str = "MP3"


class GoogleTTSClient:
    def __init__(
        self,
        auth: GoogleAuth,
        voice: VoiceSettings = VoiceSettings(),
        base_url: str = TTS_BASE_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.auth = auth
        self.voice = voice
        self._url = base_url.rstrip("/") + "/text:synthesize"
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        await self._client.aclose()

    def build_payload(self, text: str, voice: VoiceSettings) -> dict:
        return {
            "input": {"text": text},
            "voice": {
                "languageCode": voice.language_code,
                "name": voice.voice_name,
                "ssmlGender": voice.gender,
            },
            "audioConfig": {
                "audioEncoding": voice.audio_encoding,
                "speakingRate": voice.speaking_rate,
                "pitch": voice.pitch,
                "volumeGainDb": voice.volume_gain_db,
            },
        }

    async def synthesize(
        self,
        text: str,
        *,
        voice_name: Optional[str] = None,
        speaking_rate: Optional[float] = None,
        pitch: Optional[float] = None,
    ) -> bytes:
        """Return encoded audio for ``text``, raising SynthesisError on any failure.

        Keyword overrides apply to this request only.
        """
        voice = self.voice
        if voice_name is not None:
            voice = replace(voice, voice_name=voice_name)
        if speaking_rate is not None:
            voice = replace(voice, speaking_rate=speaking_rate)
        if pitch is not None:
            voice = replace(voice, pitch=pitch)

        try:
            headers, params = await self.auth.build_auth()
            resp = await self._client.post(
                self._url,
                json=self.build_payload(text, voice),
                headers=headers,
                params=params,
            )
            resp.raise_for_status()
            audio_content = resp.json().get("audioContent")
        except (httpx.HTTPError, GoogleAuthError, OSError, ValueError) as e:
            logger.error("Google TTS synthesis failed: %s", e)
            raise SynthesisError(str(e)) from e

        if not audio_content:
            raise SynthesisError("No audio content received from Google TTS")
        try:
            return base64.b64decode(audio_content)
        except (binascii.Error, TypeError) as e:
            raise SynthesisError("Undecodable audio content from Google TTS") from e
