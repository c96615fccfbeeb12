"""Cleanup and follow-up injection for model replies.

The model is told not to add closing questions or English filler, but it
does anyway; everything it appends is stripped here and replaced by one
follow-up question chosen from what the caller actually asked about.
"""

import logging
import re

from clinicvoice.classification import match_any_keyword

logger = logging.getLogger(__name__)

ENGLISH_FILLER_PATTERNS = [
    r"Feel free to ask",
    r"Feel free to",
    r"Let me know",
    r"Please let me know",
    r"Don't hesitate to",
    r"Feel free",
    r"Please",
    r"Thank you",
    r"Thanks",
]

REDUNDANT_QUESTION_PATTERNS = [
    r"¿En qué otro servicio específico estás interesado\?",
    r"¿En qué otro servicio estás interesado\?",
    r"¿Te gustaría saber más detalles sobre alguno de estos servicios en específico\?",
    r"¿Te gustaría saber más sobre alguno de estos servicios\?",
    r"¿Hay algo específico que te gustaría saber\?",
    r"¿Necesitas información adicional\?",
    r"¿Te gustaría más información\?",
    r"¿Necesitas información adicional sobre.*?\?",
    r"¿Necesitas información sobre algún.*?específico\?",
    r"¿Te gustaría saber más sobre.*?\?",
    r"¿Hay algo específico que te gustaría saber sobre.*?\?",
    r"¿Necesitas información sobre.*?\?",
    r"¿Te gustaría más información sobre.*?\?",
    r"¿Necesitas más ayuda con.*?\?",
    r"¿Hay algo más en lo que pueda asistirte\?",
    r"¿Tienes alguna pregunta específica sobre.*?\?",
    r"¡Estoy aquí para ayudarte!",
    r"¿Hay algo más en lo que pueda ayudarte\?",
    r"¿Necesitas más información sobre.*?\?",
    r"¿tienes alguna otra pregunta\?",
    r"Estoy aquí para ayudarte",
]

_REMOVALS = [re.compile(p) for p in ENGLISH_FILLER_PATTERNS + REDUNDANT_QUESTION_PATTERNS]

MENU_HINT = "Puedes decirme o presiona 0 para escuchar el menú nuevamente."

# Checked in order against the caller's original words; first match wins.
FOLLOW_UP_TOPICS = [
    (
        "services",
        frozenset({"servicios", "servicio"}),
        "¿Tienes alguna duda específica sobre nuestros servicios médicos?",
    ),
    (
        "hours",
        frozenset({"horarios", "horario"}),
        "¿Necesitas información sobre algún horario específico o día en particular?",
    ),
    (
        "appointments",
        frozenset({"citas", "cita", "agendar", "reservar"}),
        "¿Te gustaría saber más sobre cómo agendar una cita o qué documentos necesitas?",
    ),
    (
        "contact",
        frozenset({
            "contacto", "teléfono", "telefono", "dirección", "direccion",
            "ubicación", "ubicacion",
        }),
        "¿Necesitas más información de contacto o tienes alguna pregunta sobre nuestra ubicación?",
    ),
    (
        "hearing_aids",
        frozenset({"audífono", "audifono", "audífonos", "audifonos"}),
        "¿Tienes alguna pregunta específica sobre nuestros audífonos o quieres saber más sobre otros servicios?",
    ),
    (
        "implants",
        frozenset({"implante", "implantes", "cóclea", "coclea"}),
        "¿Te gustaría saber más sobre nuestros implantes cocleares o tienes alguna pregunta específica?",
    ),
    (
        "evaluations",
        frozenset({"evaluación", "evaluacion", "prueba", "test", "examen"}),
        "¿Te gustaría saber más sobre nuestras evaluaciones o tienes alguna pregunta específica sobre los procedimientos?",
    ),
]

GENERIC_FOLLOW_UP = "¿Hay algo más en lo que pueda ayudarte?"


def _sanitize_once(text: str) -> str:
    cleaned = text
    for pattern in _REMOVALS:
        cleaned = pattern.sub("", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned)
    cleaned = re.sub(r"(?:\s*\.){2,}", ".", cleaned)
    cleaned = re.sub(r"(?:\s*,){2,}", ",", cleaned)
    cleaned = cleaned.strip()
    if cleaned.endswith("."):
        cleaned = cleaned[:-1].rstrip()
    return cleaned


def sanitize_reply(text: str) -> str:
    """Strip filler and redundant questions from a model reply.

    Runs to a fixed point so that sanitize_reply(sanitize_reply(x)) == sanitize_reply(x)
    even when a removal exposes another removable phrase.
    """
    cleaned = text or ""
    while True:
        next_pass = _sanitize_once(cleaned)
        if next_pass == cleaned:
            return cleaned
        cleaned = next_pass


def follow_up_topic(user_text: str) -> str:
    for topic, keywords, _ in FOLLOW_UP_TOPICS:
        if match_any_keyword(user_text, keywords):
            return topic
    return "generic"


def contextual_follow_up(user_text: str) -> str:
    for _, keywords, question in FOLLOW_UP_TOPICS:
        if match_any_keyword(user_text, keywords):
            return f"{question} {MENU_HINT}"
    return f"{GENERIC_FOLLOW_UP} {MENU_HINT}"


def shape_reply(raw_reply: str, user_text: str) -> str:
    """Sanitize the model reply and append the follow-up for ``user_text``."""
    sanitized = sanitize_reply(raw_reply)
    follow_up = contextual_follow_up(user_text)
    logger.debug("Shaped reply (topic=%s): %r -> %r", follow_up_topic(user_text), raw_reply, sanitized)
    return f"{sanitized}. {follow_up}"
