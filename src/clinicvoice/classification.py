import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from clinicvoice.vocabulary import (
    AFFIRMATIVE_MAX_LENGTH,
    CONFIRM_KEYWORDS,
    CONFUSABLE_WORDS,
    DENY_KEYWORDS,
    FAREWELL_PHRASES,
    GRATITUDE_PHRASES,
    IN_DOMAIN_KEYWORDS,
    INTERROGATIVE_WORDS,
    NO_MORE_QUESTIONS_PHRASES,
    OFF_DOMAIN_KEYWORDS,
    SATISFACTION_PHRASES,
    STRONG_GRATITUDE_PHRASES,
    YES_TOKENS,
)

logger = logging.getLogger(__name__)


def normalize(text: str) -> str:
    return (text or "").strip().lower()


def contains_keyword(text: str, keyword: str) -> bool:
    # Plain substring: "no" also matches inside "bueno".
    return keyword in text


def match_any_keyword(text: str, keywords: Iterable[str]) -> bool:
    lower = normalize(text)
    return any(contains_keyword(lower, kw) for kw in keywords)


def detect_end_intent(text: str) -> bool:
    if match_any_keyword(text, FAREWELL_PHRASES):
        return True
    if match_any_keyword(text, GRATITUDE_PHRASES) and match_any_keyword(text, SATISFACTION_PHRASES):
        return True
    return match_any_keyword(text, STRONG_GRATITUDE_PHRASES)


def detect_no_more_questions(text: str) -> bool:
    return match_any_keyword(text, NO_MORE_QUESTIONS_PHRASES)


def detect_affirmative_follow_up(text: str) -> bool:
    """A bare "sí" in answer to the follow-up question.

    Anything longer than a short acknowledgement is treated as a real
    question and left for the relevance check.
    """
    if len(text or "") > AFFIRMATIVE_MAX_LENGTH:
        return False
    lower = normalize(text)
    if match_any_keyword(lower, INTERROGATIVE_WORDS):
        return False
    if match_any_keyword(lower, CONFUSABLE_WORDS):
        return False
    return lower in YES_TOKENS


def is_relevant_question(text: str) -> bool:
    """In-domain keyword wins, then off-domain, then any question word."""
    if match_any_keyword(text, IN_DOMAIN_KEYWORDS):
        return True
    if match_any_keyword(text, OFF_DOMAIN_KEYWORDS):
        return False
    return match_any_keyword(text, INTERROGATIVE_WORDS)


@dataclass(frozen=True)
class TurnClassification:
    wants_to_end: bool
    no_more_questions: bool
    affirmative_follow_up: bool
    is_relevant: bool


def classify_turn(text: str) -> TurnClassification:
    result = TurnClassification(
        wants_to_end=detect_end_intent(text),
        no_more_questions=detect_no_more_questions(text),
        affirmative_follow_up=detect_affirmative_follow_up(text),
        is_relevant=is_relevant_question(text),
    )
    logger.debug("Classified %r as %s", text, result)
    return result


class Confirmation(Enum):
    CONFIRMED = "confirmed"
    DENIED = "denied"
    UNCLEAR = "unclear"


def classify_confirmation(speech: str = "", digits: str = "") -> Confirmation:
    """Resolve the answer to "do you want to end the call?".

    Keypad input decides on its own when present; speech is only consulted
    without digits, and a confirm keyword beats a deny keyword.
    """
    if digits:
        if digits == "1":
            return Confirmation.CONFIRMED
        if digits == "2":
            return Confirmation.DENIED
        return Confirmation.UNCLEAR
    if match_any_keyword(speech, CONFIRM_KEYWORDS):
        return Confirmation.CONFIRMED
    if match_any_keyword(speech, DENY_KEYWORDS):
        return Confirmation.DENIED
    return Confirmation.UNCLEAR
