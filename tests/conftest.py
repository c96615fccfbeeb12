from unittest.mock import AsyncMock

import pytest

from clinicvoice.circuit_breaker import CircuitBreaker
from clinicvoice.processor import TurnProcessor
from clinicvoice.session import SessionStore
from clinicvoice.speech import SpeechRenderer
from clinicvoice.state_machine import StateMachine

SYSTEM_PROMPT = "Eres el agente virtual de una clínica de prueba."


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def system_prompt():
    return SYSTEM_PROMPT


@pytest.fixture
def store(clock):
    return SessionStore(system_prompt=SYSTEM_PROMPT, clock=clock)


@pytest.fixture
def machine(store):
    return StateMachine(store)


@pytest.fixture
def generator():
    gen = AsyncMock()
    gen.complete = AsyncMock(return_value="Atendemos de lunes a viernes de 8 am a 5 pm.")
    return gen


@pytest.fixture
def synthesizer():
    synth = AsyncMock()
    synth.synthesize = AsyncMock(return_value=b"ID3audio")
    return synth


@pytest.fixture
def publisher():
    pub = AsyncMock()
    names = iter(f"audio-{i}.mp3" for i in range(1000))
    pub.generate_file_name = lambda: next(names)
    pub.upload = AsyncMock(
        side_effect=lambda audio, name: f"https://storage.googleapis.com/bucket/{name}"
    )
    pub.delete = AsyncMock(return_value=True)
    return pub


@pytest.fixture
def speaker(synthesizer, publisher, clock):
    return SpeechRenderer(
        synthesizer=synthesizer,
        publisher=publisher,
        circuit=CircuitBreaker(failure_threshold=3, cooldown_seconds=60, clock=clock),
    )


@pytest.fixture
def processor(store, machine, generator, speaker):
    return TurnProcessor(store=store, machine=machine, generator=generator, speaker=speaker)
