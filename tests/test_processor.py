"""End-to-end webhook turns through TurnProcessor, asserting on the TwiML."""

import xml.etree.ElementTree as ET

import pytest

from clinicvoice import prompts
from clinicvoice.errors import GenerationError, SynthesisError
from clinicvoice.response_shaper import MENU_HINT


def parse(xml: str) -> ET.Element:
    return ET.fromstring(xml.encode("utf-8"))


class TestFirstTurn:
    @pytest.mark.asyncio
    async def test_language_prompt_gathers_single_digit(self, processor, synthesizer):
        root = parse(await processor.handle_voice("CA1"))
        gather = root.find("Gather")
        assert gather is not None
        assert gather.get("input") == "dtmf"
        assert gather.get("action") == "/twilio/voice"
        assert gather.get("method") == "POST"
        assert gather.get("timeout") == "10"
        assert gather.get("speechTimeout") is None
        assert gather.find("Play") is not None
        synthesizer.synthesize.assert_awaited_once_with(prompts.LANGUAGE_CHOICE)

    @pytest.mark.asyncio
    async def test_spanish_choice_creates_session(self, processor, store):
        root = parse(await processor.handle_voice("CA1", digits="1"))
        gather = root.find("Gather")
        assert gather.get("input") == "speech dtmf"
        assert gather.get("language") == "es-ES"
        assert gather.get("speechTimeout") == "auto"
        assert len(store.get("CA1").turns) == 1


class TestGeneratedTurn:
    @pytest.mark.asyncio
    async def test_hours_question(self, processor, store, generator, system_prompt):
        store.create("CA1")
        await processor.handle_voice("CA1", speech="horarios")

        generator.complete.assert_awaited_once()
        history, user_text = generator.complete.await_args.args
        assert history == [("system", system_prompt), ("user", "horarios")]
        assert user_text == "horarios"

        turns = store.history("CA1")
        assert [role for role, _ in turns] == ["system", "user", "assistant"]
        reply = turns[-1][1]
        assert reply.startswith("Atendemos de lunes a viernes de 8 am a 5 pm. ")
        assert "algún horario específico" in reply
        assert reply.endswith(MENU_HINT)

    @pytest.mark.asyncio
    async def test_reply_is_spoken(self, processor, store, synthesizer):
        store.create("CA1")
        await processor.handle_voice("CA1", speech="horarios")
        spoken = synthesizer.synthesize.await_args.args[0]
        assert spoken == store.history("CA1")[-1][1]

    @pytest.mark.asyncio
    async def test_history_accumulates_across_turns(self, processor, store, generator):
        store.create("CA1")
        await processor.handle_voice("CA1", speech="horarios")
        await processor.handle_voice("CA1", speech="¿dónde están ubicados?")
        history, _ = generator.complete.await_args.args
        assert len(history) == 4
        assert history[-1] == ("user", "¿dónde están ubicados?")

    @pytest.mark.asyncio
    async def test_menu_digit_uses_topic_keyword(self, processor, store, generator):
        store.create("CA1")
        await processor.handle_voice("CA1", digits="4")
        assert store.history("CA1")[1] == ("user", "contacto")
        assert "información de contacto" in store.history("CA1")[2][1]

    @pytest.mark.asyncio
    async def test_generation_without_session_creates_one(self, processor, store):
        await processor.handle_voice("CA1", speech="¿qué servicios ofrecen?")
        assert [role for role, _ in store.history("CA1")] == ["system", "user", "assistant"]

    @pytest.mark.asyncio
    async def test_generation_failure_uses_fallback(self, processor, store, generator):
        generator.complete.side_effect = GenerationError("timeout")
        store.create("CA1")
        await processor.handle_voice("CA1", speech="horarios")
        reply = store.history("CA1")[-1][1]
        assert reply.startswith("Lo siento, no pude generar una respuesta. ")


class TestNoGenerationTurns:
    @pytest.mark.asyncio
    async def test_off_domain_refusal(self, processor, store, generator, synthesizer):
        store.create("CA1")
        root = parse(await processor.handle_voice("CA1", speech="qué tiempo hace"))
        generator.complete.assert_not_awaited()
        assert len(store.history("CA1")) == 1
        synthesizer.synthesize.assert_awaited_once_with(prompts.OUT_OF_DOMAIN)
        assert root.find("Gather").get("action") == "/twilio/voice"

    @pytest.mark.asyncio
    async def test_end_intent_routes_to_confirm_endpoint(self, processor, store, generator):
        store.create("CA1")
        root = parse(await processor.handle_voice("CA1", speech="gracias, muy bien"))
        gather = root.find("Gather")
        assert gather.get("action") == "/twilio/confirm-end"
        assert gather.get("timeout") == "8"
        generator.complete.assert_not_awaited()
        assert [role for role, _ in store.history("CA1")] == ["system"]


class TestConfirmTurn:
    @pytest.mark.asyncio
    async def test_confirm_evicts_and_hangs_up(self, processor, store, publisher, synthesizer):
        await processor.handle_voice("CA1", digits="1")
        assert "CA1" in store

        root = parse(await processor.handle_confirm("CA1", digits="1"))
        assert root.find("Gather") is None
        assert root.find("Play") is not None
        assert root.find("Hangup") is not None
        assert store.get("CA1") is None
        synthesizer.synthesize.assert_awaited_with(prompts.FAREWELL)
        publisher.delete.assert_awaited_once_with("audio-0.mp3")

    @pytest.mark.asyncio
    async def test_deny_returns_to_voice_endpoint(self, processor, store):
        store.create("CA1")
        root = parse(await processor.handle_confirm("CA1", speech="no"))
        assert root.find("Gather").get("action") == "/twilio/voice"
        assert root.find("Hangup") is None
        assert "CA1" in store

    @pytest.mark.asyncio
    async def test_unclear_asks_again(self, processor, store):
        store.create("CA1")
        root = parse(await processor.handle_confirm("CA1", speech="mmm"))
        gather = root.find("Gather")
        assert gather.get("action") == "/twilio/confirm-end"
        assert gather.get("timeout") == "8"


class TestFallbackVoice:
    @pytest.mark.asyncio
    async def test_synthesis_failure_uses_say(self, processor, synthesizer):
        synthesizer.synthesize.side_effect = SynthesisError("quota")
        root = parse(await processor.handle_voice("CA1"))
        say = root.find("Gather").find("Say")
        assert say is not None
        assert say.text == prompts.LANGUAGE_CHOICE
        assert say.get("voice") == "alice"
        assert say.get("language") == "es-ES"


class TestSweep:
    @pytest.mark.asyncio
    async def test_idle_sessions_are_swept_and_audio_released(
        self, processor, store, publisher, clock
    ):
        await processor.handle_voice("CAold", digits="1")
        clock.advance(31 * 60)

        await processor.handle_voice("CAnew")
        assert store.get("CAold") is None
        publisher.delete.assert_awaited_once_with("audio-0.mp3")

    @pytest.mark.asyncio
    async def test_active_sessions_survive(self, processor, store, clock):
        await processor.handle_voice("CA1", digits="1")
        clock.advance(10 * 60)
        await processor.handle_voice("CA2")
        assert "CA1" in store
