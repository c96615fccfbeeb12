"""Spoken output for TwiML verbs with a built-in voice fallback.

Strategy per prompt:
  1. Synthesize with Google TTS, upload the MP3, and emit ``<Play>``.
  2. On synthesis or upload failure emit ``<Say>`` with the carrier's voice.
  3. After repeated failures the circuit breaker skips step 1 entirely until
     the cooldown elapses.

Files published for a call are tracked so they can be deleted once the call
is over.
"""

import logging
from collections import defaultdict
from typing import Optional

from clinicvoice.circuit_breaker import CircuitBreaker
from clinicvoice.errors import PublishError, SynthesisError
from clinicvoice.storage import AudioPublisher
from clinicvoice.tts import GoogleTTSClient

logger = logging.getLogger(__name__)


class SpeechRenderer:
    def __init__(
        self,
        synthesizer: GoogleTTSClient,
        publisher: AudioPublisher,
        *,
        fallback_voice: str = "alice",
        fallback_language: str = "es-ES",
        circuit: Optional[CircuitBreaker] = None,
    ):
        self._synthesizer = synthesizer
        self._publisher = publisher
        self.fallback_voice = fallback_voice
        self.fallback_language = fallback_language
        self._circuit = circuit or CircuitBreaker(
            failure_threshold=3,
            cooldown_seconds=60.0,
            label="speech synthesis",
        )
        self._published: dict[str, list[str]] = defaultdict(list)

    def published_files(self, call_id: str) -> list[str]:
        return list(self._published.get(call_id, []))

    async def speak(self, verb, text: str, call_id: str = "") -> None:
        """Append ``text`` to ``verb`` (a VoiceResponse or Gather) as audio."""
        if self._circuit.should_try():
            try:
                audio = await self._synthesizer.synthesize(text)
                file_name = self._publisher.generate_file_name()
                url = await self._publisher.upload(audio, file_name)
            except (SynthesisError, PublishError) as e:
                self._circuit.record_failure()
                logger.warning("Synthesized audio unavailable, using built-in voice: %s", e)
            else:
                self._circuit.record_success()
                if call_id:
                    self._published[call_id].append(file_name)
                verb.play(url)
                return
        else:
            logger.info("Circuit breaker open, using built-in voice directly")

        verb.say(text, voice=self.fallback_voice, language=self.fallback_language)

    async def release(self, call_id: str) -> None:
        """Delete every file published for ``call_id``; deletion failures are ignored."""
        for file_name in self._published.pop(call_id, []):
            await self._publisher.delete(file_name)
