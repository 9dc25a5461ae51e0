from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jobmate.models import AssistantMode, Priority, Suggestion, UserState
from jobmate.store import DataStore
from jobmate.suggestions.base import SuggestionHandler, plural


@dataclass
class PaymentsContext:
    user_id: str
    has_payment_method: bool
    pending_count: int


class PaymentsHandler(SuggestionHandler):
    name = "payments"
    mode = AssistantMode.PAYMENTS

    def build_context(
        self, user: UserState, store: DataStore, context: str | None, now: datetime
    ) -> PaymentsContext:
        return PaymentsContext(
            user_id=user.id,
            has_payment_method=store.has_payment_method(user.id),
            pending_count=store.count_pending_payments(user.id),
        )

    def suggest(self, ctx: PaymentsContext) -> list[Suggestion]:
        out: list[Suggestion] = []
        if not ctx.has_payment_method:
            out.append(self.make(
                ctx.user_id, "payment_setup", "Set up payment method",
                "Add a payment method to streamline transactions on JobMate.",
                Priority.HIGH, "/payments/methods",
            ))
        if ctx.pending_count > 0:
            out.append(self.make(
                ctx.user_id, "payment_management", "Pending payments",
                f"You have {plural(ctx.pending_count, 'pending payment')} "
                "that require your attention.",
                Priority.HIGH, "/payments",
            ))
        return out
