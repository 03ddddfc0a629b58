"""
Intermediate Representation (IR) for natural-language decision rules.

This module defines the immutable dataclasses a parsed rule line is turned into
before it is rendered as a DMN decision table.

Architecture:
    Rule text → IR → DMN XML
                 ↓
              Excel view
"""

import re
from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Enums
# =============================================================================

class Operator(Enum):
    """Condition operators. The value is the FEEL token."""
    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN_OR_EQUAL = "<="
    CONTAINS = "contains"
    IN = "in"

    @property
    def feel(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        """Map a comparator symbol (``>``, ``<=``, ``=``...) to an operator."""
        op = _COMPARATORS.get(symbol.strip())
        if op is None:
            raise ValueError(f"Unknown operator: {symbol}")
        return op


_COMPARATORS = {
    ">": Operator.GREATER_THAN,
    "<": Operator.LESS_THAN,
    ">=": Operator.GREATER_THAN_OR_EQUAL,
    "<=": Operator.LESS_THAN_OR_EQUAL,
    "=": Operator.EQUALS,
    "!=": Operator.NOT_EQUALS,
}

RANGE_LITERAL = re.compile(r"\[\s*(-?[0-9.]+)\s*\.\.\s*(-?[0-9.]+)\s*\]")


def normalize_variable_name(name: str) -> str:
    """Turn ``Total Amount`` into ``total_amount``.

    Trims, lower-cases, collapses whitespace runs into ``_`` and drops every
    character outside ``[a-z0-9_]``.
    """
    name = re.sub(r"\s+", "_", name.strip().lower())
    return re.sub(r"[^a-z0-9_]", "", name)


def _humanize(name: str) -> str:
    return name.replace("_", " ")


def _unpack_list_literal(value: str) -> list[str]:
    inner = value.strip()[1:-1]
    items = []
    for item in inner.split(","):
        item = item.strip()
        if len(item) >= 2 and item[0] == item[-1] == '"':
            item = item[1:-1]
        if item:
            items.append(item)
    return items


# =============================================================================
# Conditions and Actions
# =============================================================================

@dataclass(frozen=True)
class Condition:
    """A single test on an input variable.

    Examples:
        - customer = platinum
        - total_amount > 3000
        - total_amount in [1000..3000]
        - customer_membership in ["silver", "bronze"]

    ``value`` holds the raw right-hand side. For ``IN`` it is already a FEEL
    list or range literal.
    """
    variable: str
    operator: Operator
    value: str

    def to_rule_text(self) -> str:
        """Render the condition back into rule-text grammar."""
        variable = _humanize(self.variable)
        if self.operator == Operator.IN:
            match = RANGE_LITERAL.fullmatch(self.value.strip())
            if match:
                return f"{variable} between {match.group(1)} and {match.group(2)}"
            items = _unpack_list_literal(self.value)
            return f"{variable} in ({', '.join(items)})"
        elif self.operator == Operator.CONTAINS:
            return f"{variable} contains any {self.value}"
        elif self.operator == Operator.EQUALS:
            return f"{variable} is {self.value}"
        else:
            return f"{variable} {self.operator.feel} {self.value}"

    def __str__(self) -> str:
        return f"{self.variable} {self.operator.feel} {self.value}"


ALWAYS_TRUE = Condition(variable="1", operator=Operator.EQUALS, value="1")


@dataclass(frozen=True)
class Action:
    """An output assignment performed when a rule matches.

    Example:
        - discount = 25%
    """
    output_variable: str
    output_value: str

    def to_rule_text(self) -> str:
        return f"{_humanize(self.output_variable)} is {self.output_value}"

    def __str__(self) -> str:
        return f"{self.output_variable} = {self.output_value}"


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class Rule:
    """One row of a decision table.

    A rule always carries at least one condition and one action. A default
    rule (parsed from an ``Otherwise`` line) has exactly one always-true
    condition.
    """
    id: str
    conditions: tuple[Condition, ...]
    actions: tuple[Action, ...]
    raw_text: str = ""

    def __post_init__(self):
        # Accept any sequence but store tuples so the rule stays immutable
        object.__setattr__(self, "conditions", tuple(self.conditions))
        object.__setattr__(self, "actions", tuple(self.actions))
        if not self.conditions:
            raise ValueError(f"Rule {self.id} must have at least one condition")
        if not self.actions:
            raise ValueError(f"Rule {self.id} must have at least one action")

    @property
    def is_default(self) -> bool:
        return self.conditions == (ALWAYS_TRUE,)

    def condition_for(self, variable: str) -> Condition | None:
        """First condition on ``variable``, if any."""
        for condition in self.conditions:
            if condition.variable == variable:
                return condition
        return None

    def action_for(self, output_variable: str) -> Action | None:
        for action in self.actions:
            if action.output_variable == output_variable:
                return action
        return None

    def to_rule_text(self) -> str:
        actions = " and ".join(a.to_rule_text() for a in self.actions)
        if self.is_default:
            return f"Otherwise, {actions}."
        conditions = " and ".join(c.to_rule_text() for c in self.conditions)
        return f"If {conditions}, {actions}."

    def __str__(self) -> str:
        return (
            f"Rule(id={self.id!r}, conditions={len(self.conditions)}, "
            f"actions={len(self.actions)})"
        )
