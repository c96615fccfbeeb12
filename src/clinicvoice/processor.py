import logging

from twilio.twiml.voice_response import VoiceResponse

from clinicvoice.errors import GenerationError
from clinicvoice.llm_client import ChatClient
from clinicvoice.prompts import GENERATION_FALLBACK
from clinicvoice.response_shaper import shape_reply
from clinicvoice.session import DEFAULT_MAX_AGE_MINUTES, SessionStore
from clinicvoice.speech import SpeechRenderer
from clinicvoice.state_machine import Action, StateMachine

logger = logging.getLogger(__name__)


class TurnProcessor:
    """Runs one webhook turn end to end and returns the TwiML document.

    For each turn:
    1. Sweep idle sessions (voice endpoint only)
    2. Let the StateMachine decide the action
    3. If the action needs the model: create-if-absent, append user turn,
       generate from full history, shape, append assistant turn
    4. Render the prompt (synthesized audio or built-in voice) inside the
       next Gather, or hang up
    """

    def __init__(
        self,
        store: SessionStore,
        machine: StateMachine,
        generator: ChatClient,
        speaker: SpeechRenderer,
        *,
        gather_language: str = "es-ES",
        session_max_age_minutes: float = DEFAULT_MAX_AGE_MINUTES,
    ):
        self.store = store
        self.machine = machine
        self.generator = generator
        self.speaker = speaker
        self.gather_language = gather_language
        self.session_max_age_minutes = session_max_age_minutes

    async def handle_voice(self, call_id: str, speech: str = "", digits: str = "") -> str:
        for evicted in self.store.sweep(self.session_max_age_minutes):
            await self.speaker.release(evicted)

        action = self.machine.process_voice(call_id, speech, digits)
        if action.needs_llm:
            action.speak = await self.generate_reply(call_id, action.user_text)
        logger.info("[%s] -> %s", call_id, action.state.value)
        return await self.render(call_id, action)

    async def handle_confirm(self, call_id: str, speech: str = "", digits: str = "") -> str:
        action = self.machine.process_confirm(call_id, speech, digits)
        if action.end_call:
            await self.speaker.release(call_id)
        logger.info("[%s] -> %s", call_id, action.state.value)
        return await self.render(call_id, action)

    async def generate_reply(self, call_id: str, user_text: str) -> str:
        if self.store.get(call_id) is None:
            self.store.create(call_id)
        self.store.append_user(call_id, user_text)
        history = self.store.history(call_id)

        try:
            raw_reply = await self.generator.complete(history, user_text)
        except GenerationError as e:
            logger.warning("[%s] Generation failed, using fallback reply: %s", call_id, e)
            raw_reply = GENERATION_FALLBACK

        reply = shape_reply(raw_reply, user_text)
        self.store.append_assistant(call_id, reply)
        logger.info("[%s] Agent: %s", call_id, reply)
        return reply

    async def render(self, call_id: str, action: Action) -> str:
        response = VoiceResponse()
        target = response
        if action.gather is not None:
            gather_args = {
                "input": " ".join(action.gather.input),
                "language": self.gather_language,
                "timeout": action.gather.timeout,
                "action": action.gather.action,
                "method": "POST",
            }
            if action.gather.accepts_speech:
                gather_args["speech_timeout"] = "auto"
            target = response.gather(**gather_args)

        # Only audio for a live session is tracked; the farewell outlives the session.
        track_id = call_id if not action.end_call and call_id in self.store else ""
        await self.speaker.speak(target, action.speak, call_id=track_id)

        if action.end_call:
            response.hangup()
        return str(response)
