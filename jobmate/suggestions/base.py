from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from jobmate.models import AssistantMode, Suggestion, UserState
from jobmate.store import DataStore

# Job types offered when a user's skills contain any of the listed fragments
SKILL_GROUPS: dict[str, tuple[str, ...]] = {
    "web development": ("javascript", "react", "html", "css", "web"),
    "mobile development": ("ios", "android", "react native", "flutter", "mobile"),
    "design": ("design", "ui", "ux", "graphic", "photoshop", "illustrator"),
}


def skill_groups(skills: list[str]) -> list[str]:
    lowered = [s.lower() for s in skills]
    return [
        group
        for group, fragments in SKILL_GROUPS.items()
        if any(f in skill for skill in lowered for f in fragments)
    ]


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


class SuggestionHandler(ABC):
    """One area of advice: reads a typed context, emits suggestions."""

    name: str = "handler"
    mode: AssistantMode = AssistantMode.GENERAL

    def __init__(self, settings: dict[str, Any] | None = None) -> None:
        self.settings = settings or {}

    @abstractmethod
    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> Any:
        pass

    @abstractmethod
    def suggest(self, ctx: Any) -> list[Suggestion]:
        pass

    def generate(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> list[Suggestion]:
        return self.suggest(self.build_context(user, store, context, now))

    def make(
        self,
        user_id: str,
        context: str,
        title: str,
        content: str,
        priority: int,
        action_url: str | None = None,
    ) -> Suggestion:
        return Suggestion(
            user_id=user_id,
            mode=self.mode,
            context=context,
            title=title,
            content=content,
            priority=priority,
            action_url=action_url,
        )
