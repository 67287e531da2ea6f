"""
apps.targeting.resolver
~~~~~~~~~~~~~~~~~~~~~~~
Rule selection for targeting.

Selection order:
    1. **Enabled** - disabled rules are never candidates.
    2. **Conditions** - every entry of a rule's ``conditions`` object must
       match the request attributes.  Empty or ``None`` conditions always
       match.
    3. **Priority** - only the rules sharing the highest ``priority`` remain.
    4. **Weight** - one of the remaining rules is drawn with probability
       proportional to its ``weight``.  When every weight is zero the first
       remaining rule (input order) wins.

Condition values
----------------
``{"country": "DE"}``                  equality
``{"country": ["DE", "AT"]}``          membership
``{"tier": {"in": ["pro", "team"]}}``  operator object; supported operators
                                       are ``in``, ``not_in``, ``eq``, ``ne``,
                                       ``gt``, ``gte``, ``lt`` and ``lte``.
                                       All operators in the object must pass.

An attribute absent from the request fails any condition on it.

This module is **pure Python**: no Django imports, no I/O.  Rules are read
through attribute access only (``enabled``, ``conditions``, ``priority``,
``weight``), so model instances and plain objects work alike.

Public API
----------
conditions_match(conditions, attributes) -> bool
TargetingResolver.select(rules, attributes=None, rng=None) -> rule | None
"""
from __future__ import annotations

import operator
import random
from collections.abc import Mapping, Sequence
from typing import Any

_MISSING = object()

_COMPARISONS = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}
OPERATORS = frozenset(_COMPARISONS) | {"in", "not_in"}


def _is_operator_object(expected: Any) -> bool:
    return isinstance(expected, Mapping) and bool(expected) and set(expected) <= OPERATORS


def _apply_operator(op: str, actual: Any, operand: Any) -> bool:
    if op in ("in", "not_in"):
        if not isinstance(operand, (list, tuple, set, frozenset)):
            return False
        found = actual in operand
        return found if op == "in" else not found
    try:
        return bool(_COMPARISONS[op](actual, operand))
    except TypeError:
        # e.g. "10" > 5 - incomparable types never match
        return False


def _value_matches(expected: Any, actual: Any) -> bool:
    if _is_operator_object(expected):
        return all(_apply_operator(op, actual, operand) for op, operand in expected.items())
    if isinstance(expected, (list, tuple)):
        return actual in expected
    return actual == expected


def conditions_match(conditions: Mapping | None, attributes: Mapping | None) -> bool:
    """
    Return ``True`` if every entry of *conditions* holds for *attributes*.

    Args:
        conditions: ``{attribute: expected}`` mapping, or ``None``.
        attributes: Request attributes, or ``None`` for "no attributes".

    Example::

        conditions_match({"plan": {"in": ["pro"]}, "beta": True},
                         {"plan": "pro", "beta": True})
        # → True
    """
    if not conditions:
        return True
    attributes = attributes or {}
    for name, expected in conditions.items():
        actual = attributes.get(name, _MISSING)
        if actual is _MISSING:
            return False
        if not _value_matches(expected, actual):
            return False
    return True


class TargetingResolver:
    """
    Picks the rule that should serve a request.

    Example::

        rule = TargetingResolver.select(
            rules=list(TargetingRule.objects.filter(...).order_by("created_at")),
            attributes={"country": "DE"},
        )
    """

    @staticmethod
    def select(
        rules: Sequence[Any],
        attributes: Mapping | None = None,
        rng: random.Random | None = None,
    ) -> Any | None:
        """
        Choose one rule from *rules*, or ``None`` if no rule applies.

        Args:
            rules: Candidate rules, oldest first.  The order decides the
                winner when all weights in the top priority are zero.
            attributes: Request attributes used for condition matching.
            rng: Random source for the weighted draw.  Defaults to the
                module-level ``random`` generator; inject a seeded
                ``random.Random`` for reproducible results.

        Returns:
            The selected rule, or ``None`` when no enabled rule matches.
        """
        candidates = [
            rule for rule in rules
            if rule.enabled and conditions_match(rule.conditions, attributes)
        ]
        if not candidates:
            return None

        top = max(rule.priority for rule in candidates)
        candidates = [rule for rule in candidates if rule.priority == top]
        if len(candidates) == 1:
            return candidates[0]

        return TargetingResolver._weighted_choice(candidates, rng or random)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _weighted_choice(candidates: Sequence[Any], rng) -> Any:
        weights = [max(int(rule.weight or 0), 0) for rule in candidates]
        total = sum(weights)
        if total == 0:
            return candidates[0]

        point = rng.randrange(total)
        cumulative = 0
        for rule, weight in zip(candidates, weights):
            cumulative += weight
            if point < cumulative:
                return rule
        return candidates[-1]
