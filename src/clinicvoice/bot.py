import logging
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from clinicvoice.config import Settings, validate_config
from clinicvoice.errors import SynthesisError
from clinicvoice.google_auth import GoogleAuth
from clinicvoice.knowledge import CENTRO_OTOLOGICO, ClinicKnowledgeBase
from clinicvoice.llm_client import ChatClient
from clinicvoice.processor import TurnProcessor
from clinicvoice.session import SessionStore
from clinicvoice.speech import SpeechRenderer
from clinicvoice.state_machine import StateMachine
from clinicvoice.storage import AudioPublisher
from clinicvoice.tts import GoogleTTSClient

logger = logging.getLogger(__name__)


def build_processor(
    settings: Settings,
    knowledge: ClinicKnowledgeBase = CENTRO_OTOLOGICO,
) -> tuple[TurnProcessor, GoogleTTSClient]:
    """Wire the production collaborators from settings."""
    auth = GoogleAuth(
        api_key=settings.google_tts_api_key,
        credentials_path=settings.google_credentials_path,
    )
    synthesizer = GoogleTTSClient(auth=auth, voice=settings.voice)
    speaker = SpeechRenderer(
        synthesizer=synthesizer,
        publisher=AudioPublisher(bucket=settings.audio_bucket, auth=auth),
        fallback_voice=settings.fallback_voice,
        fallback_language=settings.gather_language,
    )
    store = SessionStore(system_prompt=knowledge.system_prompt())
    generator = ChatClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
    )
    processor = TurnProcessor(
        store=store,
        machine=StateMachine(store),
        generator=generator,
        speaker=speaker,
        gather_language=settings.gather_language,
        session_max_age_minutes=settings.session_max_age_minutes,
    )
    return processor, synthesizer


def create_app(
    processor: Optional[TurnProcessor] = None,
    synthesizer: Optional[GoogleTTSClient] = None,
) -> FastAPI:
    """Build the webhook app. Without arguments, configure from the environment."""
    if processor is None:
        load_dotenv()
        validate_config()
        settings = Settings.from_env()
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        processor, synthesizer = build_processor(settings)

    app = FastAPI(title="Centro Otológico Voice Agent")
    app.state.processor = processor
    app.state.synthesizer = synthesizer

    @app.get("/health")
    async def health():
        return PlainTextResponse("ok")

    @app.post("/twilio/voice")
    async def voice(request: Request):
        form = await request.form()
        xml = await app.state.processor.handle_voice(
            call_id=form.get("CallSid", ""),
            speech=form.get("SpeechResult", ""),
            digits=form.get("Digits", ""),
        )
        return Response(content=xml, media_type="application/xml")

    @app.post("/twilio/confirm-end")
    async def confirm_end(request: Request):
        form = await request.form()
        xml = await app.state.processor.handle_confirm(
            call_id=form.get("CallSid", ""),
            speech=form.get("SpeechResult", ""),
            digits=form.get("Digits", ""),
        )
        return Response(content=xml, media_type="application/xml")

    @app.post("/tts/test")
    async def tts_test(request: Request):
        """Synthesize arbitrary text for checking the configured voice."""
        body = await request.json()
        if app.state.synthesizer is None:
            return JSONResponse({"error": "Speech synthesis not configured"}, status_code=500)
        try:
            audio = await app.state.synthesizer.synthesize(body.get("text", ""))
        except SynthesisError as e:
            logger.error("TTS test failed: %s", e)
            return JSONResponse({"error": "Failed to generate speech"}, status_code=500)
        return Response(content=audio, media_type="audio/mpeg")

    return app


def main():
    load_dotenv()
    uvicorn.run(
        "clinicvoice.bot:create_app",
        factory=True,
        host="0.0.0.0",
        port=Settings.from_env().port,
    )


if __name__ == "__main__":
    main()
