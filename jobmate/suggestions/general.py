from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from jobmate.models import AssistantMode, Priority, Suggestion, UserState, as_utc
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler, plural

NEW_ACCOUNT_AGE = timedelta(days=7)


@dataclass
class GeneralContext:
    user_id: str
    is_new_user: bool
    unread_count: int


class GeneralHandler(SuggestionHandler):
    name = "general"
    mode = AssistantMode.GENERAL

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> GeneralContext:
        created = as_utc(user.created_at)
        return GeneralContext(
            user_id=user.id,
            is_new_user=created is not None and created > now - NEW_ACCOUNT_AGE,
            unread_count=store.count_unread_notifications(user.id),
        )

    def suggest(self, ctx: GeneralContext) -> list[Suggestion]:
        out: list[Suggestion] = []
        if ctx.is_new_user:
            out.append(self.make(
                ctx.user_id, "onboarding", "Welcome to JobMate!",
                "Complete your profile to get personalized job matches and opportunities.",
                Priority.HIGH, "/profile",
            ))
        if ctx.unread_count > 0:
            out.append(self.make(
                ctx.user_id, "notifications", "Unread notifications",
                f"You have {plural(ctx.unread_count, 'unread notification')}.",
                Priority.MEDIUM, "/notifications",
            ))
        out.append(self.make(
            ctx.user_id, "feature_discovery", "Explore JobMate features",
            "Discover all the tools and features available to help you succeed on JobMate.",
            Priority.LOW, "/help/features",
        ))
        return out
