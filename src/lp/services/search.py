"""Visibility-scoped plan listing with weighted text relevance."""

import re
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import Caller
from lp.config import get_settings
from lp.models import LearningPlan
from lp.services.access import visibility_filter

TOKEN_PATTERN = re.compile(r"\w+", re.UNICODE)

# Field weights, most important first
PLAN_FIELD_WEIGHTS: Dict[str, int] = {
    "title": 5,
    "category": 4,
    "tags": 3,
    "objectives": 2,
    "description": 1,
}


def tokenize(text: Optional[str]) -> List[str]:
    return TOKEN_PATTERN.findall(text.lower()) if text else []


def field_text(value: Any) -> str:
    """Flatten a stored field (string, list, embedded category) to text."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("name") or "")
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def relevance(terms: Set[str], fields: Iterable[Tuple[Any, int]]) -> float:
    """Sum of field weight times the number of distinct query terms it contains."""
    score = 0.0
    for value, weight in fields:
        matched = terms.intersection(tokenize(field_text(value)))
        score += weight * len(matched)
    return score


def plan_relevance(terms: Set[str], plan: LearningPlan) -> float:
    return relevance(
        terms,
        ((getattr(plan, name), weight) for name, weight in PLAN_FIELD_WEIGHTS.items()),
    )


class PlanSearchService:
    """List the plans a caller may read, ranked when a query is given."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    async def search(
        self, caller: Optional[Caller], query: Optional[str] = None
    ) -> List[Tuple[LearningPlan, Optional[float]]]:
        """Return ``(plan, score)`` pairs; ``score`` is ``None`` without a query."""
        stmt = select(LearningPlan).where(visibility_filter(caller))
        limit = self.settings.plan_search_limit
        terms = set(tokenize(query))

        if not terms:
            stmt = stmt.order_by(LearningPlan.updated_at.desc())
            if limit:
                stmt = stmt.limit(limit)
            result = await self.db.execute(stmt)
            return [(plan, None) for plan in result.scalars().all()]

        result = await self.db.execute(stmt)
        scored = []
        for plan in result.scalars().all():
            score = plan_relevance(terms, plan)
            if score > 0:
                scored.append((plan, score))

        scored.sort(key=lambda item: (item[1], item[0].updated_at), reverse=True)
        return scored[:limit] if limit else scored
