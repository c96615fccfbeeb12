"""Keyword tables for turn classification.

Every table is a frozenset of lower-case Spanish (and a few English) phrases.
Bump VOCABULARY_VERSION whenever a table changes so call logs can be tied to
the vocabulary that routed them.
"""

VOCABULARY_VERSION = "2024.08.1"

# --- End of call ---

FAREWELL_PHRASES = frozenset({
    "adiós", "adios", "hasta luego", "terminar", "colgar", "finalizar", "chao",
    "nos vemos", "ya no necesito", "no necesito más", "eso es todo", "ya está",
    "listo", "gracias por todo", "me voy", "hasta la vista",
    "que tengas un buen día", "finalizar conversación", "terminar llamada",
    "colgar llamada",
})

GRATITUDE_PHRASES = frozenset({
    "gracias", "muchas gracias", "te agradezco", "muy agradecido",
})

SATISFACTION_PHRASES = frozenset({
    "perfecto", "excelente", "muy bien", "genial", "está bien",
})

STRONG_GRATITUDE_PHRASES = frozenset({
    "muchas gracias", "te agradezco mucho",
})

# Keywords match as substrings, so bare "no" also fires on ordinary negative
# answers ("no, quiero saber de audífonos") and inside words ("bueno",
# "audífonos"). Short keywords elsewhere behave the same way: "pr" and "ent"
# in "presidente", "si" in "sinusitis", "sol" in "solo", "que" in "porque".
# Kept pending product review.
NO_MORE_QUESTIONS_PHRASES = frozenset({
    "no", "nada más", "eso es todo", "ya está", "listo",
    "no tengo más preguntas", "no necesito más", "ya no", "eso es",
})

# --- Short acknowledgements ---

AFFIRMATIVE_MAX_LENGTH = 10

YES_TOKENS = frozenset({"sí", "si", "yes"})

CONFUSABLE_WORDS = frozenset({
    "segur", "seguro", "segura", "seguras", "seguros", "seguridad",
    "asegurar", "asegura",
})

INTERROGATIVE_WORDS = frozenset({
    "qué", "que", "cuál", "cual", "cómo", "como", "dónde", "donde",
    "cuándo", "cuando", "por qué", "porque", "quién", "quien",
})

# --- Domain relevance ---

IN_DOMAIN_KEYWORDS = frozenset({
    # medical terms
    "oído", "oreja", "audición", "sordera", "audífono", "implante", "cóclea",
    "sinusitis", "alergia", "garganta", "nariz", "amígdalas", "adenoides",
    "vértigo", "equilibrio", "tinnitus", "otorrinolaringólogo", "ent",
    "otorrinolaringología", "otorrino",
    # clinic services
    "consulta", "cita", "citas", "doctor", "médico", "clínica", "centro médico",
    "evaluación", "prueba", "test", "examen", "diagnóstico",
    "tratamiento", "cirugía", "operación", "procedimiento",
    # clinic information
    "horario", "horarios", "teléfono", "dirección", "ubicación", "servicios",
    "precio", "costo", "tarifa", "seguro", "seguros",
    "emergencia", "urgencia", "walk-in", "sin cita",
    "contacto", "información", "info",
    # the clinic itself
    "centro otológico", "centro otologico", "dr. lasalle", "dr lasalle",
    "mayagüez", "mayaguez", "puerto rico", "pr",
})

OFF_DOMAIN_KEYWORDS = frozenset({
    "clima", "tiempo", "temperatura", "lluvia", "sol",
    "deportes", "fútbol", "futbol", "béisbol", "beisbol",
    "política", "elecciones", "gobierno",
    "entretenimiento", "película", "pelicula", "música", "musica",
    "comida", "restaurante", "receta", "cocina",
    "tecnología", "tecnologia", "computadora", "internet",
    "viaje", "turismo", "hotel", "avión", "avion",
})

# --- Confirmation sub-dialogue ---

CONFIRM_KEYWORDS = frozenset({"sí", "si", "yes", "confirmo", "correcto", "exacto"})
DENY_KEYWORDS = frozenset({"no", "cancelar", "continuar", "seguir"})

# --- Keypad menu ---

MENU_TOPICS = {
    "1": "servicios",
    "2": "horarios",
    "3": "citas",
    "4": "contacto",
}
DEFAULT_MENU_TOPIC = "servicios"
REPLAY_MENU_DIGIT = "0"

LANGUAGE_DIGITS = {"1": "es", "2": "en"}
