import logging
from dataclasses import dataclass
from typing import Optional

from clinicvoice import prompts
from clinicvoice.classification import Confirmation, classify_confirmation, classify_turn
from clinicvoice.session import SessionStore
from clinicvoice.states import CallState
from clinicvoice.transcript import to_plain_text
from clinicvoice.vocabulary import (
    DEFAULT_MENU_TOPIC,
    LANGUAGE_DIGITS,
    MENU_TOPICS,
    REPLAY_MENU_DIGIT,
    VOCABULARY_VERSION,
)

logger = logging.getLogger(__name__)

VOICE_PATH = "/twilio/voice"
CONFIRM_PATH = "/twilio/confirm-end"

TURN_TIMEOUT_S = 10
CONFIRM_TIMEOUT_S = 8


@dataclass(frozen=True)
class Gather:
    input: tuple[str, ...]
    action: str
    timeout: int

    @property
    def accepts_speech(self) -> bool:
        return "speech" in self.input


LANGUAGE_GATHER = Gather(input=("dtmf",), action=VOICE_PATH, timeout=TURN_TIMEOUT_S)
MENU_GATHER = Gather(input=("speech", "dtmf"), action=VOICE_PATH, timeout=TURN_TIMEOUT_S)
CONFIRM_GATHER = Gather(input=("speech", "dtmf"), action=CONFIRM_PATH, timeout=CONFIRM_TIMEOUT_S)


@dataclass
class Action:
    state: CallState
    speak: str = ""
    gather: Optional[Gather] = None
    end_call: bool = False
    needs_llm: bool = False
    user_text: str = ""


TRANSITIONS = {
    CallState.AWAITING_LANGUAGE_CHOICE: {
        CallState.AWAITING_LANGUAGE_CHOICE,
        CallState.AWAITING_MENU_OR_SPEECH,
        CallState.CONFIRMING_END,
    },
    CallState.AWAITING_MENU_OR_SPEECH: {
        CallState.AWAITING_MENU_OR_SPEECH,
        CallState.CONFIRMING_END,
    },
    CallState.CONFIRMING_END: {
        CallState.CONFIRMING_END,
        CallState.AWAITING_MENU_OR_SPEECH,
        CallState.ENDED,
    },
    CallState.ENDED: set(),
}


class StateMachine:
    """Decides what one webhook turn should say and which input to gather next.

    The machine owns the session lifecycle transitions (create on language
    choice, evict on confirmed hang-up). Turns that need the model come back
    with ``needs_llm`` set and ``user_text`` filled in; the processor runs the
    generation pipeline and fills ``speak``.
    """

    def __init__(self, store: SessionStore):
        self.store = store

    def valid_transitions(self, state: CallState) -> set[CallState]:
        return TRANSITIONS.get(state, set())

    def process_voice(self, call_id: str, speech: str = "", digits: str = "") -> Action:
        speech = (speech or "").strip()
        digits = (digits or "").strip()

        if not speech and not digits:
            return Action(
                state=CallState.AWAITING_LANGUAGE_CHOICE,
                speak=prompts.LANGUAGE_CHOICE,
                gather=LANGUAGE_GATHER,
            )
        if speech:
            return self._handle_speech(call_id, speech)
        if self.store.get(call_id) is None and digits in LANGUAGE_DIGITS:
            return self._handle_language_choice(call_id, digits)
        return self._handle_menu_digit(call_id, digits)

    def process_confirm(self, call_id: str, speech: str = "", digits: str = "") -> Action:
        outcome = classify_confirmation((speech or "").strip(), (digits or "").strip())
        logger.info("[%s] End confirmation: %s", call_id, outcome.value)

        if outcome == Confirmation.CONFIRMED:
            session = self.store.get(call_id)
            if session is not None:
                logger.info("[%s] Transcript:\n%s", call_id, to_plain_text(session.turns))
            self.store.sweep(0, call_id=call_id)
            return Action(state=CallState.ENDED, speak=prompts.FAREWELL, end_call=True)

        if outcome == Confirmation.DENIED:
            return Action(
                state=CallState.AWAITING_MENU_OR_SPEECH,
                speak=prompts.CONTINUE,
                gather=MENU_GATHER,
            )

        return Action(
            state=CallState.CONFIRMING_END,
            speak=prompts.CONFIRM_UNCLEAR,
            gather=CONFIRM_GATHER,
        )

    # ── Turn handlers ──

    def _handle_language_choice(self, call_id: str, digits: str) -> Action:
        if LANGUAGE_DIGITS[digits] == "es":
            self.store.create(call_id)
        else:
            # English prompts do not exist yet; caller hears the Spanish welcome.
            logger.info("[%s] English requested, continuing in Spanish", call_id)
        return Action(
            state=CallState.AWAITING_MENU_OR_SPEECH,
            speak=prompts.WELCOME,
            gather=MENU_GATHER,
        )

    def _handle_menu_digit(self, call_id: str, digits: str) -> Action:
        if digits == REPLAY_MENU_DIGIT:
            return Action(
                state=CallState.AWAITING_MENU_OR_SPEECH,
                speak=prompts.MENU,
                gather=MENU_GATHER,
            )
        topic = MENU_TOPICS.get(digits)
        if topic is None:
            logger.warning("[%s] Unrecognized digit %r, defaulting to %s", call_id, digits, DEFAULT_MENU_TOPIC)
            topic = DEFAULT_MENU_TOPIC
        logger.info("[%s] Menu digit %s -> %s", call_id, digits, topic)
        return Action(
            state=CallState.AWAITING_MENU_OR_SPEECH,
            gather=MENU_GATHER,
            needs_llm=True,
            user_text=topic,
        )

    def _handle_speech(self, call_id: str, speech: str) -> Action:
        text = speech.lower()
        turn = classify_turn(text)
        logger.info("[%s] Caller: %s (%s, vocabulary %s)", call_id, text, turn, VOCABULARY_VERSION)

        if turn.wants_to_end:
            return Action(
                state=CallState.CONFIRMING_END,
                speak=prompts.CONFIRM_END,
                gather=CONFIRM_GATHER,
            )
        if turn.no_more_questions:
            return Action(
                state=CallState.CONFIRMING_END,
                speak=prompts.CONFIRM_NO_MORE_QUESTIONS,
                gather=CONFIRM_GATHER,
            )
        if turn.affirmative_follow_up:
            return Action(
                state=CallState.AWAITING_MENU_OR_SPEECH,
                speak=prompts.OPEN_HELP,
                gather=MENU_GATHER,
            )
        if not turn.is_relevant:
            return Action(
                state=CallState.AWAITING_MENU_OR_SPEECH,
                speak=prompts.OUT_OF_DOMAIN,
                gather=MENU_GATHER,
            )
        return Action(
            state=CallState.AWAITING_MENU_OR_SPEECH,
            gather=MENU_GATHER,
            needs_llm=True,
            user_text=text,
        )
