from __future__ import annotations

from typing import Any

from .base import SuggestionHandler
from .general import GeneralHandler
from .job_description import JobDescriptionHandler
from .marketplace import MarketplaceHandler
from .matching import MatchingHandler
from .payments import PaymentsHandler
from .pricing import PricingHandler
from .profile import ProfileHandler
from .project_setup import ProjectSetupHandler

from jobmate.log import get_logger
from jobmate.models import AssistantMode

log = get_logger(__name__)

__all__ = [
    "SuggestionHandler", "GeneralHandler", "JobDescriptionHandler",
    "MarketplaceHandler", "MatchingHandler", "PaymentsHandler",
    "PricingHandler", "ProfileHandler", "ProjectSetupHandler",
    "HANDLERS_BY_MODE", "get_handlers",
]

# Primary handler first; the rest run in order after it
HANDLERS_BY_MODE: dict[AssistantMode, tuple[type[SuggestionHandler], ...]] = {
    AssistantMode.MATCHING: (MatchingHandler, PricingHandler),
    AssistantMode.PROJECT_SETUP: (ProjectSetupHandler, JobDescriptionHandler, PricingHandler),
    AssistantMode.PROFILE: (ProfileHandler,),
    AssistantMode.PAYMENTS: (PaymentsHandler, PricingHandler),
    AssistantMode.MARKETPLACE: (MarketplaceHandler, JobDescriptionHandler, PricingHandler),
    AssistantMode.GENERAL: (GeneralHandler,),
}


def get_handlers(
    mode: AssistantMode | str | None, settings: dict[str, Any] | None = None
) -> list[SuggestionHandler]:
    resolved = AssistantMode.parse(mode)
    handlers = [cls(settings) for cls in HANDLERS_BY_MODE[resolved]]
    log.debug("Mode %s → handlers: %s", resolved.value, ", ".join(h.name for h in handlers))
    return handlers
