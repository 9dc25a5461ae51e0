"""Render ranked job matches as a markdown report."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jobmate.config import REPORTS_DIR
from jobmate.log import get_logger
from jobmate.models import ScoredMatch, SpecialistProfile
from jobmate.premium import premium_badges

log = get_logger(__name__)

FACTOR_LABELS: dict[str, str] = {
    "skill_match": "Skills",
    "location_proximity": "Location",
    "price_match": "Price",
    "reputation_score": "Reputation",
    "availability_match": "Availability",
}


def _budget(scored: ScoredMatch) -> str:
    lo, hi = scored.job.budget_min, scored.job.budget_max
    if lo is None and hi is None:
        return "—"
    if hi is None:
        return f"${lo:g}+"
    if lo is None:
        return f"up to ${hi:g}"
    return f"${lo:g}-{hi:g}"


def build_match_report(
    specialist: SpecialistProfile, matches: list[ScoredMatch], *, limit: int = 15
) -> str:
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    lines: list[str] = [f"# Job Matches for {specialist.name} ({date})", ""]

    badges = premium_badges(specialist)
    if badges:
        lines.append(f"_Badges: {', '.join(badges)}_")
        lines.append("")

    top = matches[:limit]
    lines.append(f"**{len(matches)}** matching jobs")
    lines.append("")

    if not top:
        lines.append("No open jobs scored above the threshold.")
        lines.append("")
        return "\n".join(lines)

    lines.append("## Top Matches")
    lines.append("")
    for s in top:
        lines.append(f"### {s.job.title} ({s.result.score}%)")
        if s.job.category:
            lines.append(f"- **Category:** {s.job.category}")
        lines.append(f"- **Budget:** {_budget(s)}")
        lines.append(f"- **Urgency:** {s.job.urgency.value}")
        if s.result.explanations:
            lines.append(f"- **Why:** {'; '.join(s.result.explanations[:5])}")
        lines.append("")

    lines.append("---")
    lines.append("")
    lines.append("## Factor Breakdown")
    lines.append("")
    header = " | ".join(FACTOR_LABELS.values())
    lines.append(f"| # | Job | Score | {header} |")
    lines.append("|--:|-----|------:|" + "------:|" * len(FACTOR_LABELS))
    for i, s in enumerate(top, 1):
        title = s.job.title[:40] + ("…" if len(s.job.title) > 40 else "")
        factors = s.result.factors.as_dict()
        cells = " | ".join(f"{factors[k]:.0%}" for k in FACTOR_LABELS)
        lines.append(f"| {i} | {title} | {s.result.score}% | {cells} |")
    lines.append("")

    log.info("Built match report: %d jobs for %s", len(matches), specialist.id)
    return "\n".join(lines)


def write_report(content: str, name: str = "matches") -> Path:
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    path = REPORTS_DIR / f"{name}_{date}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
