"""
Declarative readiness rules.

A rule is a reason string, a predicate that holds when the data is complete,
a severity and an ``applies`` guard. The readiness gate and the pack
validator are both plain lists of rules run through ``evaluate_rules``, and
they share the field predicates defined here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from models.pack import DocumentType, PackSelection
from models.records import ProductIdentifiers, ReadinessRecord


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class RuleContext:
    """The data a rule looks at. ``readiness`` is never None here."""

    readiness: ReadinessRecord
    identifiers: Optional[ProductIdentifiers] = None
    selection: PackSelection = field(default_factory=PackSelection)


Predicate = Callable[[RuleContext], bool]


def always(ctx: RuleContext) -> bool:
    return True


@dataclass(frozen=True)
class Rule:
    """``predicate`` returns True when the requirement is satisfied."""

    reason: str
    predicate: Predicate
    severity: Severity = Severity.ERROR
    applies: Predicate = always


def evaluate_rules(rules: Sequence[Rule], ctx: RuleContext) -> Tuple[List[str], List[str]]:
    """
    Run ``rules`` in order.

    Returns:
        (errors, warnings): reasons of the failed rules, by severity, in rule order
    """
    errors: List[str] = []
    warnings: List[str] = []
    for rule in rules:
        if not rule.applies(ctx) or rule.predicate(ctx):
            continue
        if rule.severity is Severity.ERROR:
            errors.append(rule.reason)
        else:
            warnings.append(rule.reason)
    return errors, warnings


# =============================================================================
# SHARED PREDICATES
# =============================================================================

def field_positive(name: str) -> Predicate:
    """Holds when readiness field ``name`` is set and greater than zero."""

    def check(ctx: RuleContext) -> bool:
        value = getattr(ctx.readiness, name)
        return value is not None and value > 0

    check.__name__ = f"{name}_positive"
    return check


def field_set(name: str) -> Predicate:
    """Holds when readiness field ``name`` is not empty."""

    def check(ctx: RuleContext) -> bool:
        return bool(getattr(ctx.readiness, name))

    check.__name__ = f"{name}_set"
    return check


def all_of(*predicates: Predicate) -> Predicate:
    def check(ctx: RuleContext) -> bool:
        return all(predicate(ctx) for predicate in predicates)

    return check


def has_fnsku(ctx: RuleContext) -> bool:
    return bool(ctx.identifiers and ctx.identifiers.fnsku)


def has_label_code(ctx: RuleContext) -> bool:
    return bool(ctx.identifiers and ctx.identifiers.label_code())


def needs_fnsku(ctx: RuleContext) -> bool:
    return ctx.readiness.needs_fnsku


def selected(*document_types: DocumentType) -> Predicate:
    """Holds when any of ``document_types`` is part of the selection."""

    def check(ctx: RuleContext) -> bool:
        return any(ctx.selection.includes(doc) for doc in document_types)

    return check


def not_selected(document_type: DocumentType) -> Predicate:
    def check(ctx: RuleContext) -> bool:
        return not ctx.selection.includes(document_type)

    return check


labels_generated = field_set("labels_generated_at")
carton_dimensions_set = all_of(
    field_positive("carton_length_cm"),
    field_positive("carton_width_cm"),
    field_positive("carton_height_cm"),
)
