"""Declarative body validation — FieldRule tables and the ValidateBody stage."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from listing_pipeline.context import RequestContext
from listing_pipeline.outcome import Continue, ErrorKind, Fail, Outcome
from listing_pipeline.stage import PipelineStage, StageCategory

_MISSING = object()

_TYPE_NAMES = {
    str: "a string",
    float: "a number",
    list: "an array",
    dict: "an object",
    bool: "a boolean",
}


@dataclass(frozen=True)
class FieldRule:
    """One row of a validation table.

    ``path`` is dotted (``budget.min``). ``kind`` is one of ``str``,
    ``float`` (any number, numeric strings included), ``list``, ``dict`` or
    ``bool``. ``pattern`` is a regular expression the whole trimmed string
    must match. ``choices`` applies to the value itself, or to every item when
    ``kind`` is ``list``. ``message`` replaces every generated message.
    """

    path: str
    kind: type
    required: bool = False
    choices: frozenset[Any] | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    message: str | None = None


def lookup_path(body: dict[str, Any], path: str) -> Any:
    node: Any = body
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _check(rule: FieldRule, value: Any) -> str | None:
    if rule.kind is float:
        number = _as_number(value)
        if number is None:
            return f"{rule.path} must be a number"
        if rule.minimum is not None and number < rule.minimum:
            return f"{rule.path} must be at least {rule.minimum:g}"
        if rule.maximum is not None and number > rule.maximum:
            return f"{rule.path} must be at most {rule.maximum:g}"
        return None

    # bool is an int subclass; only accept it where a boolean is asked for
    wrong_bool = rule.kind is not bool and isinstance(value, bool)
    if wrong_bool or not isinstance(value, rule.kind):
        return f"{rule.path} must be {_TYPE_NAMES.get(rule.kind, rule.kind.__name__)}"

    if isinstance(value, str):
        length = len(value.strip())
        if rule.min_length is not None and length < rule.min_length:
            if rule.min_length == 1:
                return f"{rule.path} is required"
            return f"{rule.path} must be at least {rule.min_length} characters"
        if rule.max_length is not None and length > rule.max_length:
            return f"{rule.path} must be at most {rule.max_length} characters"
        if rule.pattern is not None and re.fullmatch(rule.pattern, value.strip()) is None:
            return f"{rule.path} has an invalid format"

    if rule.choices is not None:
        if isinstance(value, list):
            if not all(_hashable_in(item, rule.choices) for item in value):
                return f"Invalid {rule.path} options"
        elif not _hashable_in(value, rule.choices):
            return f"{rule.path} must be one of: {', '.join(sorted(map(str, rule.choices)))}"
    return None


def _hashable_in(value: Any, choices: frozenset[Any]) -> bool:
    try:
        return value in choices
    except TypeError:
        return False


def validate_fields(
    body: dict[str, Any], rules: Iterable[FieldRule]
) -> list[dict[str, str]]:
    """Check every rule against ``body`` and return all violations."""
    violations: list[dict[str, str]] = []
    for rule in rules:
        value = lookup_path(body, rule.path)
        if value is _MISSING or value is None:
            if rule.required:
                message = rule.message or f"{rule.path} is required"
                violations.append({"field": rule.path, "message": message})
            continue

        problem = _check(rule, value)
        if problem is not None:
            violations.append({"field": rule.path, "message": rule.message or problem})
    return violations


class ValidateBody(PipelineStage):
    """Rejects the request with every violation found in its body."""

    category = StageCategory.VALIDATION

    def __init__(
        self, rules: Sequence[FieldRule], *, detail: str = "Validation failed"
    ) -> None:
        self._rules = tuple(rules)
        self._detail = detail

    async def run(self, ctx: RequestContext) -> Outcome:
        violations = validate_fields(ctx.body, self._rules)
        if violations:
            return Fail(ErrorKind.VALIDATION, self._detail, errors=tuple(violations))
        return Continue(ctx)
