"""Price-calculator suggestions, personalized from past estimates when available."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from jobmate.log import get_logger
from jobmate.models import AssistantMode, PriceHistoryEntry, Priority, Suggestion, UserState
from jobmate.price_history import personalized_estimates
from jobmate.pricing import DEFAULT_HOURS, calculate_price_estimate
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler, skill_groups

log = get_logger(__name__)

PRICING_KEYWORDS: tuple[str, ...] = (
    "price", "cost", "budget", "estimate", "quote", "how much", "pricing",
)
PROJECT_CONTEXTS: tuple[str, ...] = ("job_creation", "project_setup")

# skill group → (category, title, noun, context, url slug)
GROUP_ESTIMATES: dict[str, tuple[str, str, str, str, str]] = {
    "web development": (
        "Web Development", "Web Development Pricing", "web development", "web_development", "web",
    ),
    "mobile development": (
        "Mobile Development", "Mobile App Pricing", "mobile app", "mobile_development", "mobile",
    ),
    "design": ("UI/UX Design", "Design Project Pricing", "design", "design", "design"),
}


@dataclass
class PricingContext:
    user_id: str
    context: str | None
    triggered: bool
    history: list[PriceHistoryEntry] = field(default_factory=list)
    skill_groups: list[str] = field(default_factory=list)
    default_hours: int = DEFAULT_HOURS


def is_pricing_context(context: str | None) -> bool:
    if not context:
        return False
    text = context.lower()
    return any(k in text for k in PRICING_KEYWORDS)


class PricingHandler(SuggestionHandler):
    name = "pricing"
    mode = AssistantMode.PROJECT_SETUP

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> PricingContext:
        triggered = is_pricing_context(context) or context in PROJECT_CONTEXTS
        hours = int(self.settings.get("pricing", {}).get("default_hours", DEFAULT_HOURS))
        if not triggered:
            return PricingContext(user_id=user.id, context=context, triggered=False)

        try:
            history = store.get_price_history(user.id)
        except Exception as exc:
            log.warning("Price history unavailable for %s: %s", user.id, exc)
            history = []

        return PricingContext(
            user_id=user.id,
            context=context,
            triggered=True,
            history=history,
            skill_groups=skill_groups(user.skill_names),
            default_hours=hours,
        )

    def suggest(self, ctx: PricingContext) -> list[Suggestion]:
        if not ctx.triggered:
            return []

        uid = ctx.user_id
        out = [self.make(
            uid, ctx.context or "pricing", "Estimate Project Cost",
            "Get a price estimate based on project type, complexity, and duration.",
            Priority.MEDIUM, "/project/price-calculator",
        )]

        personalized = personalized_estimates(uid, ctx.history)
        if personalized:
            out.extend(personalized)
        else:
            for group in ctx.skill_groups:
                category, title, noun, context, slug = GROUP_ESTIMATES[group]
                est = calculate_price_estimate(category, hours=ctx.default_hours)
                out.append(self.make(
                    uid, context, title,
                    f"Typical {noun} projects cost between ${est.total_min}-{est.total_max}.",
                    Priority.MEDIUM, f"/project/price-calculator?category={slug}",
                ))

        if ctx.context == "job_creation":
            out.append(self.make(
                uid, "budget_optimization", "Optimize Your Budget",
                "Learn how to set a competitive budget that attracts quality specialists.",
                Priority.LOW, "/guides/budget-optimization",
            ))
        return out
