import pytest

from clinicvoice.response_shaper import (
    GENERIC_FOLLOW_UP,
    MENU_HINT,
    contextual_follow_up,
    follow_up_topic,
    sanitize_reply,
    shape_reply,
)


class TestSanitizeReply:
    def test_removes_redundant_question(self):
        raw = "Atendemos de lunes a viernes. ¿Hay algo más en lo que pueda ayudarte?"
        assert sanitize_reply(raw) == "Atendemos de lunes a viernes"

    def test_removes_english_filler(self):
        assert sanitize_reply("Please call us. Thank you.") == "call us"

    def test_removes_open_ended_question(self):
        raw = "Ofrecemos implantes cocleares. ¿Te gustaría saber más sobre los implantes?"
        assert sanitize_reply(raw) == "Ofrecemos implantes cocleares"

    def test_collapses_whitespace(self):
        assert sanitize_reply("Hola   mundo\n\nadiós") == "Hola mundo adiós"

    def test_collapses_repeated_periods(self):
        assert sanitize_reply("Hola...") == "Hola"

    def test_strips_single_trailing_period(self):
        assert sanitize_reply("Estamos en Mayagüez.") == "Estamos en Mayagüez"

    def test_none_and_empty(self):
        assert sanitize_reply("") == ""
        assert sanitize_reply(None) == ""

    @pytest.mark.parametrize("raw", [
        "Hola...",
        "Estamos abiertos. Feel free to ask. .",
        "Servicios: audífonos, , implantes. ¿Necesitas información adicional?",
        "Claro.  Thank you .",
        "Let me know Please",
    ])
    def test_idempotent(self, raw):
        once = sanitize_reply(raw)
        assert sanitize_reply(once) == once


class TestFollowUpTopic:
    def test_services(self):
        assert follow_up_topic("¿qué servicios ofrecen?") == "services"

    def test_hours(self):
        assert follow_up_topic("¿cuál es el horario?") == "hours"

    def test_appointments(self):
        assert follow_up_topic("quiero agendar una cita") == "appointments"

    def test_contact(self):
        assert follow_up_topic("¿cuál es el teléfono?") == "contact"

    def test_hearing_aids(self):
        assert follow_up_topic("¿cuánto cuesta un audífono?") == "hearing_aids"

    def test_implants(self):
        assert follow_up_topic("implante coclear") == "implants"

    def test_evaluations(self):
        assert follow_up_topic("necesito un examen") == "evaluations"

    def test_first_matching_topic_wins(self):
        assert follow_up_topic("horarios de citas") == "hours"
        assert follow_up_topic("servicios y horarios") == "services"

    def test_generic(self):
        assert follow_up_topic("me duele el oído") == "generic"


class TestContextualFollowUp:
    def test_always_ends_with_menu_hint(self):
        assert contextual_follow_up("horario").endswith(MENU_HINT)
        assert contextual_follow_up("nada").endswith(MENU_HINT)

    def test_generic_question(self):
        assert contextual_follow_up("me duele el oído") == f"{GENERIC_FOLLOW_UP} {MENU_HINT}"


class TestShapeReply:
    def test_hours_reply(self):
        reply = shape_reply(
            "Atendemos de lunes a viernes de 8:00 am a 5:00 pm. ¿Necesitas información adicional?",
            "¿cuál es el horario?",
        )
        assert reply == (
            "Atendemos de lunes a viernes de 8:00 am a 5:00 pm. "
            "¿Necesitas información sobre algún horario específico o día en particular? "
            + MENU_HINT
        )

    def test_strips_model_follow_up_before_adding_ours(self):
        reply = shape_reply(
            "Estamos en Mayagüez. ¿Hay algo más en lo que pueda ayudarte?",
            "dirección",
        )
        assert reply.count("¿") == 1
        assert reply.startswith("Estamos en Mayagüez. ¿Necesitas más información de contacto")
