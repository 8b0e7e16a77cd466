"""Context-aware writing prompts for the next journal entry."""

from typing import Sequence

from reflector.aggregate import newest_first
from reflector.models import AnyEntry, ThemeTag

DEFAULT_PROMPT = "What stood out to you today? Start with one detail."


def writing_prompt(entries: Sequence[AnyEntry]) -> str:
    """Suggest a prompt based on the tags of the latest entry."""
    if not entries:
        return DEFAULT_PROMPT

    latest = newest_first(entries)[0]
    tags = set(getattr(latest, "tags", ()))

    if ThemeTag.STRESSED in tags or ThemeTag.ANXIOUS in tags:
        return "What helped you steady yourself today? Capture one thing that eased the stress."
    if ThemeTag.CREATIVE in tags:
        return "What sparked your creativity? Jot the idea before it fades."
    if ThemeTag.REST in tags:
        return "How did you recharge today? Note what made rest feel restorative."
    if ThemeTag.ENERGIZED in tags:
        return "Where did your energy come from? Name the routine you want to repeat."
    return "What shifted your mood today? Write a few lines to capture it."
