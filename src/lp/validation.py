"""Tagged validation results and pydantic error flattening.

Validators in this module never raise for malformed input. They return
``Ok(value)`` with the normalized model, or ``Err(issues)`` where ``issues``
maps each field to its messages. Nested fields map to nested issues, and list
positions become string keys, e.g.::

    {"title": ["Title is required"],
     "segments": {"0": {"tasks": {"2": {"priority": ["..."]}}}}}
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, List, Mapping, Sequence, TypeVar, Union

from pydantic import ValidationError

from lp.schemas.plans import PlanCreate
from lp.schemas.segments import SegmentCreate, SegmentDraft
from lp.schemas.tasks import TaskCreate, TaskDraft

T = TypeVar("T")

FieldErrors = Dict[str, Any]

ROOT = "_errors"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: bool = True


@dataclass(frozen=True)
class Err:
    issues: FieldErrors
    ok: bool = False


Result = Union[Ok[T], Err]


def add_issue(issues: FieldErrors, path: Sequence[Any], message: str) -> None:
    """Record ``message`` under ``path`` inside ``issues``."""
    node = issues
    for part in path[:-1]:
        key = str(part)
        child = node.get(key)
        if isinstance(child, list):
            child = {ROOT: child}
            node[key] = child
        elif child is None:
            child = {}
            node[key] = child
        node = child

    leaf = str(path[-1]) if path else ROOT
    existing = node.get(leaf)
    if isinstance(existing, dict):
        existing.setdefault(ROOT, []).append(message)
    else:
        node.setdefault(leaf, []).append(message)


def merge_issues(target: FieldErrors, key: str, issues: FieldErrors) -> None:
    """Attach ``issues`` under ``key``, merging with anything already there."""
    current = target.setdefault(key, {})
    for field, value in issues.items():
        if isinstance(value, dict):
            merge_issues(current, field, value)
        else:
            current.setdefault(field, []).extend(value)


def issues_from_pydantic(
    errors: Iterable[Mapping[str, Any]], strip: Sequence[str] = ()
) -> FieldErrors:
    """Convert ``ValidationError.errors()`` into nested field issues."""
    issues: FieldErrors = {}
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in strip:
            loc = loc[1:]
        add_issue(issues, loc, error.get("msg", "Invalid value"))
    return issues


def validate_model(model: type, data: Any) -> Result:
    if not isinstance(data, Mapping):
        return Err({ROOT: ["Expected an object"]})
    try:
        return Ok(model.model_validate(data))
    except ValidationError as exc:
        return Err(issues_from_pydantic(exc.errors()))


def validate_plan(data: Any) -> Result:
    """Validate a learning plan payload (owner included)."""
    return validate_model(PlanCreate, data)


def validate_segment(data: Any, nested: bool = False) -> Result:
    """Validate a segment; ``nested`` omits the ``learningPlanId`` reference."""
    return validate_model(SegmentDraft if nested else SegmentCreate, data)


def validate_task(data: Any, nested: bool = False) -> Result:
    """Validate a task; ``nested`` omits the ``segmentId`` reference."""
    return validate_model(TaskDraft if nested else TaskCreate, data)


def messages(issues: FieldErrors) -> List[str]:
    """Flatten issues into a list of messages, mostly for logging."""
    out: List[str] = []
    for value in issues.values():
        if isinstance(value, dict):
            out.extend(messages(value))
        else:
            out.extend(value)
    return out
