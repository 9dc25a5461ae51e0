"""Job-matching advice: skills, top matches and application follow-ups."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from jobmate.log import get_logger
from jobmate.models import (
    Application,
    AssistantMode,
    JobRecord,
    Priority,
    Suggestion,
    UserState,
    as_utc,
)
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler

log = get_logger(__name__)

STALE_APPLICATION_AGE = timedelta(days=7)


@dataclass
class MatchingContext:
    user_id: str
    context: str | None
    skill_count: int
    top_matches: list[JobRecord]
    latest_application: Application | None
    now: datetime


class MatchingHandler(SuggestionHandler):
    name = "matching"
    mode = AssistantMode.MATCHING

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> MatchingContext:
        top: list[JobRecord] = []
        if context == "job_matching":
            limit = int(self.settings.get("matching", {}).get("top_matches", 3))
            try:
                top = store.find_matches_for_user(user.id, limit=limit)
            except Exception as exc:
                log.warning("Match lookup failed for %s: %s", user.id, exc)

        dated = [a for a in user.applications if a.created_at is not None]
        latest = max(dated, key=lambda a: as_utc(a.created_at)) if dated else None
        return MatchingContext(
            user_id=user.id,
            context=context,
            skill_count=len(user.skills),
            top_matches=top,
            latest_application=latest,
            now=now,
        )

    def suggest(self, ctx: MatchingContext) -> list[Suggestion]:
        out: list[Suggestion] = []
        uid = ctx.user_id

        if ctx.context == "job_matching":
            if ctx.skill_count == 0:
                out.append(self.make(
                    uid, "job_matching", "Add skills to improve matches",
                    "Adding relevant skills to your profile will help you get better job matches.",
                    Priority.HIGH, "/profile/skills",
                ))

            if ctx.top_matches:
                best = ctx.top_matches[0]
                out.append(self.make(
                    uid, "job_matching", "Top job match available",
                    f'We found a great match: "{best.title}". '
                    "This job aligns well with your skills and preferences.",
                    Priority.MEDIUM, f"/jobs/{best.id}",
                ))
                if len(ctx.top_matches) < 3:
                    out.append(self.make(
                        uid, "job_matching", "Expand your matching criteria",
                        "Consider adjusting your location preferences or adding more skills "
                        "to see more job matches.",
                        Priority.LOW, "/profile/preferences",
                    ))
            else:
                out.append(self.make(
                    uid, "job_matching", "No matches found",
                    "Try expanding your search criteria or adding more skills to your profile.",
                    Priority.MEDIUM, "/profile/skills",
                ))

        app = ctx.latest_application
        if app is not None:
            out.append(self.make(
                uid, "application_status", "Recent application status",
                f'You applied to "{app.job_title}" recently. Check the status of your application.',
                Priority.MEDIUM, f"/applications/{app.id}",
            ))
            if ctx.now - as_utc(app.created_at) > STALE_APPLICATION_AGE:
                out.append(self.make(
                    uid, "job_discovery", "New job opportunities",
                    "It's been a week since your last application. "
                    "Check out new job postings that match your skills.",
                    Priority.MEDIUM, "/jobs",
                ))
        return out
