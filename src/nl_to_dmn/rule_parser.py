"""
Natural-language rule parser.

Parses plain-English business rules into IR. Supported forms:
- If customer is platinum and total amount > 3000, discount is 25%.
- If total amount between 1000 and 3000, discount is 15%.
- If customer membership in (silver, bronze), discount is 5%.
- If the order contains any electronics, risk level is "High".
- Otherwise, discount is 0%.

Conditions are joined with ``and`` and separated from the actions by the first
comma outside parentheses. Actions are ``<variable> is <value>`` clauses joined
with ``and``.
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from nl_to_dmn.ir import (
    ALWAYS_TRUE, Operator, Condition, Action, Rule, normalize_variable_name,
)
from nl_to_dmn.lexer import (
    find_separator_comma, is_numeric, split_conditions, split_actions,
)


logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", "//")


# =============================================================================
# Errors
# =============================================================================

class RuleParseError(Exception):
    """Raised when a rule line cannot be parsed."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class EmptyRuleError(RuleParseError):
    """The line is empty or blank."""


class MissingKeywordError(RuleParseError):
    """The line starts with neither ``If`` nor ``Otherwise``."""


class MissingSeparatorError(RuleParseError):
    """No top-level comma separates conditions from actions."""


class UnparseableClauseError(RuleParseError):
    """A condition or action clause matches none of the known patterns."""

    def __init__(self, message: str, clause: str, text: str = ""):
        super().__init__(message, text)
        self.clause = clause


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one line: either a rule or the error it raised."""
    line_number: int
    text: str
    rule: Rule | None = None
    error: RuleParseError | None = None

    @property
    def ok(self) -> bool:
        return self.rule is not None


@dataclass
class ParseReport:
    """Rules parsed from a block of text plus a diagnostic per dropped line."""
    rules: list[Rule] = field(default_factory=list)
    diagnostics: list[ParseResult] = field(default_factory=list)


def default_id_factory(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


# =============================================================================
# Parser
# =============================================================================

class RuleParser:
    """Parser for natural-language rule lines into IR."""

    # Variable names: a letter or underscore, then letters, digits, _ or spaces
    VARIABLE = r"([a-zA-Z_][a-zA-Z0-9_\s]*)"

    IF_KEYWORD = re.compile(r"if\s", re.IGNORECASE)
    OTHERWISE_KEYWORD = re.compile(r"otherwise\b", re.IGNORECASE)

    # Condition patterns, tried in this order
    BETWEEN_PATTERN = re.compile(
        VARIABLE + r"\s+between\s+(-?[0-9.]+)\s+and\s+(-?[0-9.]+)",
        re.IGNORECASE,
    )
    IN_LIST_PATTERN = re.compile(
        VARIABLE + r"\s+in\s+\(([^)]+)\)",
        re.IGNORECASE,
    )
    CONTAINS_PATTERN = re.compile(
        VARIABLE + r"\s+contains\s+(?:any\s+)?(.+)",
        re.IGNORECASE,
    )
    IS_PATTERN = re.compile(
        VARIABLE + r"\s+is\s+(.+)",
        re.IGNORECASE,
    )
    COMPARISON_PATTERN = re.compile(
        VARIABLE + r"\s+(>=|<=|>|<|!=|=)\s+(.+)",
        re.IGNORECASE,
    )

    def __init__(self, id_factory: Callable[[str], str] | None = None):
        self.id_factory = id_factory or default_id_factory

    def parse(self, line: str) -> Rule:
        """Parse a single rule line into a Rule.

        Raises:
            EmptyRuleError: the line is blank
            MissingKeywordError: the line starts with neither If nor Otherwise
            MissingSeparatorError: no top-level comma was found
            UnparseableClauseError: a clause matches no pattern
        """
        if line is None or not line.strip():
            raise EmptyRuleError("Rule text cannot be empty", line or "")

        text = line.strip()

        if self.OTHERWISE_KEYWORD.match(text):
            return self._parse_otherwise(text, line)

        if not self.IF_KEYWORD.match(text):
            raise MissingKeywordError(
                f"Rule must start with 'If' or 'Otherwise'. Got: {text}", line
            )

        comma = find_separator_comma(text)
        if comma == -1:
            raise MissingSeparatorError(
                f"Rule must have a comma separating conditions from actions. Got: {text}",
                line,
            )

        conditions = self._parse_conditions(text[3:comma].strip(), line)
        actions = self._parse_actions(text[comma + 1:].strip(), line)

        return Rule(
            id=self.id_factory("rule"),
            conditions=conditions,
            actions=actions,
            raw_text=line,
        )

    def try_parse(self, line: str, line_number: int = 0) -> ParseResult:
        """Parse a line without raising; the error is carried in the result."""
        try:
            rule = self.parse(line)
        except RuleParseError as e:
            return ParseResult(line_number=line_number, text=line, error=e)
        return ParseResult(line_number=line_number, text=line, rule=rule)

    def parse_text(self, text: str) -> ParseReport:
        """Parse every rule line in ``text``.

        Blank lines and comment lines (``#`` or ``//``) are skipped. Lines that
        fail to parse are dropped and recorded as diagnostics.
        """
        report = ParseReport()

        for line_number, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIXES):
                continue

            result = self.try_parse(stripped, line_number)
            if result.ok:
                report.rules.append(result.rule)
            else:
                logger.warning(
                    "Skipping line %d: %s (%s)", line_number, stripped, result.error
                )
                report.diagnostics.append(result)

        return report

    def _parse_otherwise(self, text: str, raw_text: str) -> Rule:
        """Parse a default rule: one always-true condition plus the actions."""
        comma = find_separator_comma(text)
        if comma == -1 or text[len("otherwise"):comma].strip():
            raise MissingSeparatorError(
                f"Otherwise rule must be followed by a comma. Got: {text}", raw_text
            )

        actions = self._parse_actions(text[comma + 1:].strip(), raw_text)

        return Rule(
            id=self.id_factory("rule_otherwise"),
            conditions=(ALWAYS_TRUE,),
            actions=actions,
            raw_text=raw_text,
        )

    def _parse_conditions(self, conditions_text: str, raw_text: str) -> list[Condition]:
        parts = split_conditions(conditions_text)
        if not parts:
            raise UnparseableClauseError(
                "At least one condition is required", conditions_text, raw_text
            )
        return [self._parse_condition(part, raw_text) for part in parts]

    def _parse_condition(self, clause: str, raw_text: str) -> Condition:
        """Parse one condition clause, trying the patterns in fixed order."""
        match = self.BETWEEN_PATTERN.fullmatch(clause)
        if match:
            low, high = match.group(2), match.group(3)
            if not (is_numeric(low) and is_numeric(high)):
                raise UnparseableClauseError(
                    f"Range bounds must be numbers: {clause}", clause, raw_text
                )
            return Condition(
                variable=normalize_variable_name(match.group(1)),
                operator=Operator.IN,
                value=f"[{low}..{high}]",
            )

        match = self.IN_LIST_PATTERN.fullmatch(clause)
        if match:
            return Condition(
                variable=normalize_variable_name(match.group(1)),
                operator=Operator.IN,
                value=self._format_list(match.group(2)),
            )

        match = self.CONTAINS_PATTERN.fullmatch(clause)
        if match:
            return Condition(
                variable=normalize_variable_name(match.group(1)),
                operator=Operator.CONTAINS,
                value=match.group(2).strip(),
            )

        match = self.IS_PATTERN.fullmatch(clause)
        if match:
            return Condition(
                variable=normalize_variable_name(match.group(1)),
                operator=Operator.EQUALS,
                value=match.group(2).strip(),
            )

        match = self.COMPARISON_PATTERN.fullmatch(clause)
        if match:
            return Condition(
                variable=normalize_variable_name(match.group(1)),
                operator=Operator.from_symbol(match.group(2)),
                value=match.group(3).strip(),
            )

        raise UnparseableClauseError(
            f"Could not parse condition: {clause}", clause, raw_text
        )

    def _format_list(self, items_text: str) -> str:
        """Render ``silver, bronze`` as the FEEL list ``["silver", "bronze"]``."""
        items = []
        for item in items_text.split(","):
            item = item.strip()
            if len(item) >= 2 and item[0] == item[-1] and item[0] in ('"', "'"):
                item = item[1:-1]
            items.append(f'"{item}"')
        return "[" + ", ".join(items) + "]"

    def _parse_actions(self, actions_text: str, raw_text: str) -> list[Action]:
        actions = []

        for part in split_actions(actions_text):
            if part.endswith("."):
                part = part[:-1].strip()
            if not part:
                continue
            actions.append(self._parse_action(part, raw_text))

        if not actions:
            raise UnparseableClauseError(
                "At least one action is required", actions_text, raw_text
            )
        return actions

    def _parse_action(self, clause: str, raw_text: str) -> Action:
        match = self.IS_PATTERN.fullmatch(clause)
        if match:
            return Action(
                output_variable=normalize_variable_name(match.group(1)),
                output_value=match.group(2).strip(),
            )
        raise UnparseableClauseError(
            f"Could not parse action: {clause}", clause, raw_text
        )


def parse_rule(line: str) -> Rule:
    """Convenience function to parse one rule line."""
    return RuleParser().parse(line)


def parse_many(text: str) -> list[Rule]:
    """Convenience function to parse a block of rule lines, skipping failures."""
    return RuleParser().parse_text(text).rules


def parse_file(file_path: str | Path) -> list[Rule]:
    """Convenience function to parse a rule text file."""
    path = Path(file_path)
    return parse_many(path.read_text(encoding="utf-8"))
