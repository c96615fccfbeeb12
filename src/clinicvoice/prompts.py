"""Canned caller-facing prompts.

Everything the agent says without asking the model lives here. Only Spanish
is implemented; the English keypad option currently hears the Spanish welcome.
"""

MENU_OPTIONS = "presiona 1 para servicios, 2 para horarios, 3 para citas, 4 para contacto."

LANGUAGE_CHOICE = "Para español presiona 1, for English press 2."

WELCOME = (
    "Hola, soy el agente virtual del Centro Otológico de Puerto Rico. "
    f"Puedes decirme en qué puedo ayudarte o {MENU_OPTIONS}"
)

MENU = MENU_OPTIONS

CONFIRM_END = (
    "¿Estás seguro de que quieres terminar la conversación? "
    "Presiona 1 para sí, presiona 2 para no, o dime directamente tu respuesta."
)

CONFIRM_NO_MORE_QUESTIONS = (
    "Perfecto, entiendo que ya no necesitas más ayuda. "
    "¿Te parece bien terminar la conversación? "
    "Presiona 1 para sí, presiona 2 para no, o dime directamente tu respuesta."
)

OPEN_HELP = f"Perfecto, dime directamente en qué puedo ayudarte o {MENU_OPTIONS}"

OUT_OF_DOMAIN = (
    "Lo siento, solo puedo ayudarte con información sobre nuestros servicios otológicos. "
    f"Dime directamente en qué puedo ayudarte o {MENU_OPTIONS}"
)

CONTINUE = f"Perfecto, continuemos. Dime directamente en qué puedo ayudarte o {MENU_OPTIONS}"

CONFIRM_UNCLEAR = (
    "No entendí tu respuesta. Presiona 1 para terminar la conversación, "
    "presiona 2 para continuar, o dime directamente tu respuesta."
)

FAREWELL = "Gracias por llamar al Centro Otológico de Puerto Rico. ¡Que tengas un buen día!"

GENERATION_FALLBACK = "Lo siento, no pude generar una respuesta."
