"""Ownership and visibility rules for learning plans."""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from lp.auth import Caller
from lp.errors import AuthenticationRequired, Forbidden
from lp.models import LearningPlan


def can_read(caller: Optional[Caller], plan: LearningPlan) -> bool:
    """Public plans are readable by anyone; private ones only by their owner."""
    return bool(plan.is_public) or (
        caller is not None and caller.user_id == plan.owner_id
    )


def can_write(caller: Optional[Caller], plan: LearningPlan) -> bool:
    """Only the owner may modify a plan or anything inside it."""
    return caller is not None and caller.user_id == plan.owner_id


def ensure_readable(caller: Optional[Caller], plan: LearningPlan) -> None:
    if not can_read(caller, plan):
        raise Forbidden()


def ensure_writable(caller: Optional[Caller], plan: LearningPlan) -> None:
    if caller is None:
        raise AuthenticationRequired()
    if not can_write(caller, plan):
        raise Forbidden()


def require_admin(caller: Optional[Caller]) -> Caller:
    if caller is None:
        raise AuthenticationRequired()
    if not caller.is_admin:
        raise Forbidden("Administrator role required")
    return caller


def visibility_filter(caller: Optional[Caller]) -> ColumnElement[bool]:
    """Query predicate restricting plans to those ``caller`` may see."""
    if caller is None:
        return LearningPlan.is_public.is_(True)
    return or_(
        LearningPlan.is_public.is_(True),
        LearningPlan.owner_id == caller.user_id,
    )
