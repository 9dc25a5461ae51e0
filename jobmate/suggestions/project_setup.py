"""Advice for customers creating and running projects."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jobmate.models import AssistantMode, JobStatus, Priority, Suggestion, UserState
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler, plural


@dataclass
class ProjectSetupContext:
    user_id: str
    context: str | None
    posted_count: int
    open_count: int
    unreviewed_count: int


class ProjectSetupHandler(SuggestionHandler):
    name = "project_setup"
    mode = AssistantMode.PROJECT_SETUP

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> ProjectSetupContext:
        jobs = user.jobs_posted
        return ProjectSetupContext(
            user_id=user.id,
            context=context,
            posted_count=len(jobs),
            open_count=sum(1 for j in jobs if j.status == JobStatus.OPEN),
            unreviewed_count=sum(
                1 for j in jobs if j.status == JobStatus.COMPLETED and not j.client_reviewed
            ),
        )

    def suggest(self, ctx: ProjectSetupContext) -> list[Suggestion]:
        out: list[Suggestion] = []
        uid = ctx.user_id

        if ctx.context == "job_creation":
            if ctx.posted_count == 0:
                out.append(self.make(
                    uid, "job_creation", "First time posting a job?",
                    "Here are some tips for creating an effective job posting that attracts "
                    "the right specialists.",
                    Priority.HIGH,
                ))
            out.append(self.make(
                uid, "job_creation", "Add detailed requirements",
                "Jobs with clear requirements get 50% more qualified applicants. "
                "Be specific about skills needed.",
                Priority.MEDIUM,
            ))
            out.append(self.make(
                uid, "job_creation", "Set a competitive budget",
                "Setting a fair budget attracts more qualified specialists. "
                "Research market rates for similar services.",
                Priority.LOW,
            ))

        if ctx.open_count:
            out.append(self.make(
                uid, "project_management", "Manage your open projects",
                f"You have {plural(ctx.open_count, 'open project')}. "
                "Make sure to review applications and set up milestones.",
                Priority.MEDIUM, "/dashboard/projects",
            ))

        if ctx.unreviewed_count:
            out.append(self.make(
                uid, "project_reviews", "Leave reviews for completed projects",
                f"You have {plural(ctx.unreviewed_count, 'completed project')} without reviews. "
                "Leaving feedback helps the community.",
                Priority.LOW, "/dashboard/reviews",
            ))
        return out
