from enum import Enum

INPUT_STATES = {"awaiting_language_choice", "awaiting_menu_or_speech", "confirming_end"}
TERMINAL_STATES = {"ended"}


class CallState(Enum):
    AWAITING_LANGUAGE_CHOICE = "awaiting_language_choice"
    AWAITING_MENU_OR_SPEECH = "awaiting_menu_or_speech"
    CONFIRMING_END = "confirming_end"
    ENDED = "ended"

    @property
    def expects_input(self) -> bool:
        return self.value in INPUT_STATES

    @property
    def is_terminal(self) -> bool:
        return self.value in TERMINAL_STATES
