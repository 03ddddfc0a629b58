"""
FEEL rendering for decision-table cells.

Turns IR conditions and actions into the FEEL text placed in DMN input and
output entries. Only the small unary-test subset produced by the rule parser
is covered; FEEL is never parsed or evaluated here.
"""

from typing import Iterable
from xml.sax.saxutils import escape

from nl_to_dmn.ir import Operator, Condition, Action, Rule
from nl_to_dmn.lexer import is_numeric, is_boolean


WILDCARD = "-"
NULL = "null"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def is_feel_literal(value: str) -> bool:
    """True if ``value`` can be used in FEEL as is.

    Quoted strings, lists/ranges, numbers and booleans are left alone;
    anything else is a bare word that needs quoting.
    """
    return (
        value.startswith('"')
        or value.startswith("[")
        or is_numeric(value)
        or is_boolean(value)
    )


def format_value(value: str) -> str:
    """Quote ``value`` unless it is already a FEEL literal.

    Examples:
        platinum -> "platinum"
        3000 -> 3000
        "Low" -> "Low"
    """
    if is_feel_literal(value):
        return value
    return f'"{value}"'


def input_entry(condition: Condition | None) -> str:
    """FEEL unary test for an input cell; ``-`` when there is no condition."""
    if condition is None:
        return WILDCARD
    if condition.operator == Operator.IN:
        return condition.value
    if condition.operator == Operator.CONTAINS:
        return f"contains(., {format_value(condition.value)})"
    if condition.operator == Operator.EQUALS:
        return format_value(condition.value)
    return f"{condition.operator.feel} {format_value(condition.value)}"


def output_entry(action: Action | None) -> str:
    """FEEL literal for an output cell; ``null`` when the rule sets nothing."""
    if action is None:
        return NULL
    return format_value(action.output_value)


def collect_variables(rules: Iterable[Rule]) -> tuple[list[str], list[str]]:
    """Distinct input and output variable names, in first-seen order."""
    inputs: dict[str, None] = {}
    outputs: dict[str, None] = {}

    for rule in rules:
        for condition in rule.conditions:
            inputs.setdefault(condition.variable, None)
        for action in rule.actions:
            outputs.setdefault(action.output_variable, None)

    return list(inputs), list(outputs)


def escape_xml(text: str | None) -> str:
    """Escape ``& < > " '`` for use in XML text or attribute values."""
    if text is None:
        return ""
    return escape(text, _XML_ENTITIES)
