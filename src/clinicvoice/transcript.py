from clinicvoice.session import Turn

_LABELS = {"assistant": "Agent", "user": "Caller"}


def to_plain_text(turns: list[Turn]) -> str:
    """Render a session's turns as "Agent:" / "Caller:" lines.

    The system turn is the knowledge-base prompt, not conversation, and is
    left out.
    """
    lines = []
    for turn in turns:
        label = _LABELS.get(turn.role)
        if label:
            lines.append(f"{label}: {turn.text}")
    return "\n".join(lines)
