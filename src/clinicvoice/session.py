import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_MINUTES = 30


@dataclass
class Turn:
    role: str
    text: str
    timestamp: float


@dataclass
class CallSession:
    call_id: str
    turns: list[Turn] = field(default_factory=list)
    last_activity_at: float = 0.0

    @property
    def has_system_turn(self) -> bool:
        return bool(self.turns) and self.turns[0].role == "system"


class SessionStore:
    """In-memory conversation state, one CallSession per CallSid.

    Shared by every webhook turn in the process. There is no lock: the
    carrier serializes webhook deliveries per call and each turn runs to
    completion on the event loop before the next one for that call arrives.
    A multi-worker deployment needs per-call mutual exclusion around the
    mutating methods.
    """

    def __init__(self, system_prompt: str, clock: Callable[[], float] = time.time):
        self._system_prompt = system_prompt
        self._clock = clock
        self._sessions: dict[str, CallSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, call_id: str) -> bool:
        return call_id in self._sessions

    def create(self, call_id: str) -> CallSession:
        """Start a fresh session, replacing any prior one for this call."""
        now = self._clock()
        session = CallSession(
            call_id=call_id,
            turns=[Turn(role="system", text=self._system_prompt, timestamp=now)],
            last_activity_at=now,
        )
        self._sessions[call_id] = session
        logger.info("Session created for %s", call_id)
        return session

    def get(self, call_id: str) -> Optional[CallSession]:
        return self._sessions.get(call_id)

    def append_user(self, call_id: str, text: str) -> None:
        self._append(call_id, "user", text)

    def append_assistant(self, call_id: str, text: str) -> None:
        self._append(call_id, "assistant", text)

    def _append(self, call_id: str, role: str, text: str) -> None:
        session = self._sessions.get(call_id)
        if session is None:
            # Callers create before appending; a missing session drops the turn.
            logger.debug("No session for %s, dropping %s turn", call_id, role)
            return
        now = self._clock()
        session.turns.append(Turn(role=role, text=text, timestamp=now))
        session.last_activity_at = now

    def history(self, call_id: str) -> list[tuple[str, str]]:
        session = self._sessions.get(call_id)
        if session is None:
            return []
        return [(turn.role, turn.text) for turn in session.turns]

    def reset_keep_system(self, call_id: str) -> None:
        session = self._sessions.get(call_id)
        if session is None:
            return
        session.turns = [turn for turn in session.turns[:1] if turn.role == "system"]
        session.last_activity_at = self._clock()

    def sweep(
        self,
        max_age_minutes: float = DEFAULT_MAX_AGE_MINUTES,
        call_id: Optional[str] = None,
    ) -> list[str]:
        """Evict sessions idle for at least ``max_age_minutes``.

        With ``call_id`` only that session is considered. Returns the evicted ids.
        """
        cutoff = self._clock() - max_age_minutes * 60
        if call_id is not None:
            candidates = [call_id] if call_id in self._sessions else []
        else:
            candidates = list(self._sessions)

        evicted = []
        for cid in candidates:
            if self._sessions[cid].last_activity_at <= cutoff:
                del self._sessions[cid]
                evicted.append(cid)
        if evicted:
            logger.info("Swept %d session(s): %s", len(evicted), ", ".join(evicted))
        return evicted
