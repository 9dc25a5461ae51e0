from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from jobmate.models import AssistantMode, Priority, Suggestion, UserState
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler, skill_groups

JOB_POSTING_KEYWORDS: tuple[str, ...] = (
    "job description", "post a job", "create listing", "write description", "job post",
)


@dataclass
class JobDescriptionContext:
    user_id: str
    is_posting_context: bool
    has_posted_jobs: bool
    skill_groups: list[str] = field(default_factory=list)


class JobDescriptionHandler(SuggestionHandler):
    name = "job_description"
    mode = AssistantMode.PROJECT_SETUP

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> JobDescriptionContext:
        text = (context or "").lower()
        return JobDescriptionContext(
            user_id=user.id,
            is_posting_context=any(k in text for k in JOB_POSTING_KEYWORDS),
            has_posted_jobs=bool(user.jobs_posted),
            skill_groups=skill_groups(user.skill_names),
        )

    def suggest(self, ctx: JobDescriptionContext) -> list[Suggestion]:
        if not (ctx.is_posting_context or ctx.has_posted_jobs):
            return []

        uid = ctx.user_id
        out = [self.make(
            uid, "job_description", "Create job description",
            "Let me help you create a professional job description based on your requirements.",
            Priority.MEDIUM, "/job/create-description",
        )]
        for group in ctx.skill_groups:
            slug = group.replace(" ", "_")
            out.append(self.make(
                uid, slug, f"{group.capitalize()} job template",
                f"Create a professional {group} job description with best practices.",
                Priority.MEDIUM, f"/job/create-description?category={slug}",
            ))
        if ctx.has_posted_jobs:
            out.append(self.make(
                uid, "job_improvement", "Improve job description",
                "I can help you improve your existing job posts to attract better candidates.",
                Priority.LOW, "/job/improve",
            ))
        return out
