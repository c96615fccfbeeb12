"""Startup configuration.

Settings come from environment variables (a local ``.env`` is loaded by
bot.py). ``validate_config`` runs before the server accepts calls so that a
missing key fails at startup rather than mid-call.
"""

import logging
import os
import sys
from dataclasses import dataclass

from clinicvoice.session import DEFAULT_MAX_AGE_MINUTES
from clinicvoice.tts import VoiceSettings

logger = logging.getLogger(__name__)

REQUIRED_VARS = [
    "OPENAI_API_KEY",
    "AUDIO_BUCKET",
]

# At least one of these must be set for speech synthesis.
GOOGLE_CREDENTIAL_VARS = [
    "GOOGLE_TTS_API_KEY",
    "GOOGLE_APPLICATION_CREDENTIALS",
]

OPTIONAL_VARS = [
    "OPENAI_MODEL",
    "OPENAI_MAX_TOKENS",
    "TTS_LANGUAGE_CODE",
    "TTS_VOICE_NAME",
    "TTS_VOICE_GENDER",
    "TTS_SPEAKING_RATE",
    "TTS_PITCH",
    "TTS_VOLUME_GAIN_DB",
    "FALLBACK_VOICE",
    "GATHER_LANGUAGE",
    "SESSION_MAX_AGE_MINUTES",
    "LOG_LEVEL",
]


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 200
    google_tts_api_key: str = ""
    google_credentials_path: str = ""
    audio_bucket: str = "voice-agent-audio"
    voice: VoiceSettings = VoiceSettings()
    fallback_voice: str = "alice"
    gather_language: str = "es-ES"
    session_max_age_minutes: float = DEFAULT_MAX_AGE_MINUTES
    log_level: str = "INFO"
    port: int = 8765

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        voice_defaults = defaults.voice
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", defaults.openai_model),
            openai_max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", defaults.openai_max_tokens)),
            google_tts_api_key=os.getenv("GOOGLE_TTS_API_KEY", ""),
            google_credentials_path=os.getenv("GOOGLE_APPLICATION_CREDENTIALS", ""),
            audio_bucket=os.getenv("AUDIO_BUCKET", defaults.audio_bucket),
            voice=VoiceSettings(
                language_code=os.getenv("TTS_LANGUAGE_CODE", voice_defaults.language_code),
                voice_name=os.getenv("TTS_VOICE_NAME", voice_defaults.voice_name),
                gender=os.getenv("TTS_VOICE_GENDER", voice_defaults.gender),
                speaking_rate=float(os.getenv("TTS_SPEAKING_RATE", voice_defaults.speaking_rate)),
                pitch=float(os.getenv("TTS_PITCH", voice_defaults.pitch)),
                volume_gain_db=float(os.getenv("TTS_VOLUME_GAIN_DB", voice_defaults.volume_gain_db)),
            ),
            fallback_voice=os.getenv("FALLBACK_VOICE", defaults.fallback_voice),
            gather_language=os.getenv("GATHER_LANGUAGE", defaults.gather_language),
            session_max_age_minutes=float(
                os.getenv("SESSION_MAX_AGE_MINUTES", defaults.session_max_age_minutes)
            ),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            port=int(os.getenv("PORT", defaults.port)),
        )


def validate_config() -> None:
    """Validate environment variables at startup.

    Exits the process with a clear error if any required variable is missing
    or empty.  Logs warnings for missing optional variables.
    """
    missing = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if not any(os.getenv(var) for var in GOOGLE_CREDENTIAL_VARS):
        missing.append(" or ".join(GOOGLE_CREDENTIAL_VARS))

    if missing:
        print(
            f"\nFATAL: Missing required environment variables:\n"
            f"  {', '.join(missing)}\n"
            f"\nSet them in .env (local) or in the deployment environment.\n",
            file=sys.stderr,
        )
        sys.exit(1)

    for var in OPTIONAL_VARS:
        if not os.getenv(var):
            logger.warning("Optional env var %s is not set, using default", var)
