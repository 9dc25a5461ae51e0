from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jobmate.models import AssistantMode, Priority, Suggestion, UserState
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler


@dataclass
class MarketplaceContext:
    user_id: str
    is_specialist: bool
    service_count: int


class MarketplaceHandler(SuggestionHandler):
    name = "marketplace"
    mode = AssistantMode.MARKETPLACE

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> MarketplaceContext:
        return MarketplaceContext(
            user_id=user.id,
            is_specialist=user.is_specialist,
            service_count=len(user.services),
        )

    def suggest(self, ctx: MarketplaceContext) -> list[Suggestion]:
        if not ctx.is_specialist:
            return [self.make(
                ctx.user_id, "service_discovery", "Discover top services",
                "Browse our top-rated services that match your interests.",
                Priority.MEDIUM, "/marketplace",
            )]
        if ctx.service_count == 0:
            return [self.make(
                ctx.user_id, "service_listing", "List your services",
                "Start offering your services in the marketplace to attract more clients.",
                Priority.HIGH, "/marketplace/my-services/new",
            )]
        return [self.make(
            ctx.user_id, "service_optimization", "Optimize your service listings",
            "Add detailed descriptions and clear pricing to make your services stand out.",
            Priority.MEDIUM, "/marketplace/my-services",
        )]
