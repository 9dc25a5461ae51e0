from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jobmate.models import AssistantMode, Priority, Suggestion, UserState
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler


@dataclass
class ProfileContext:
    user_id: str
    context: str | None
    skill_count: int
    endorsed_count: int
    has_bio: bool
    has_portfolio: bool
    is_specialist: bool


class ProfileHandler(SuggestionHandler):
    name = "profile"
    mode = AssistantMode.PROFILE

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> ProfileContext:
        return ProfileContext(
            user_id=user.id,
            context=context,
            skill_count=len(user.skills),
            endorsed_count=sum(1 for s in user.skills if s.endorsements > 0),
            has_bio=bool(user.bio.strip()),
            has_portfolio=user.portfolio_items > 0,
            is_specialist=user.is_specialist,
        )

    def suggest(self, ctx: ProfileContext) -> list[Suggestion]:
        out: list[Suggestion] = []
        uid = ctx.user_id

        if ctx.context == "skills_management":
            if ctx.skill_count < 5:
                out.append(self.make(
                    uid, "skills_management", "Add more skills",
                    "Users with 5+ skills get 3x more job matches. "
                    "Add more relevant skills to your profile.",
                    Priority.MEDIUM,
                ))
            if ctx.endorsed_count < ctx.skill_count / 2:
                out.append(self.make(
                    uid, "skills_management", "Get skill endorsements",
                    "Endorsed skills increase your credibility. "
                    "Ask colleagues to endorse your skills.",
                    Priority.LOW,
                ))
            return out

        if not ctx.has_bio:
            out.append(self.make(
                uid, "profile_completion", "Complete your bio",
                "A professional bio helps clients understand your background and expertise.",
                Priority.HIGH, "/profile",
            ))
        if ctx.is_specialist and not ctx.has_portfolio:
            out.append(self.make(
                uid, "profile_completion", "Add portfolio items",
                "Showcase your work with portfolio items to attract more clients.",
                Priority.MEDIUM, "/profile/portfolio",
            ))
        return out
