"""
DMN Writer.

Serializes IR rules to a DMN 1.3 decision table with hit policy FIRST.

Layout:
    definitions
      decision
        decisionTable hitPolicy="FIRST"
          input       one per distinct condition variable
          output      one per distinct action variable
          rule        one per Rule, in list order
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from nl_to_dmn.ir import Rule
from nl_to_dmn.feel import collect_variables, escape_xml, input_entry, output_entry


logger = logging.getLogger(__name__)

DMN_NAMESPACE = "https://www.omg.org/spec/DMN/20191111/MODEL/"
DMNDI_NAMESPACE = "https://www.omg.org/spec/DMN/20191111/DMNDI/"
DC_NAMESPACE = "http://www.omg.org/spec/DMN/20180521/DC/"
CAMUNDA_NAMESPACE = "http://camunda.org/schema/1.0/dmn"

HIT_POLICY = "FIRST"


@dataclass(frozen=True)
class DecisionTableConfig:
    """Naming and formatting of the generated decision."""
    decision_name: str = "Decision"
    decision_id: str = "decision_1"
    namespace: str = CAMUNDA_NAMESPACE
    indent: str = "  "


class DMNWriter:
    """Writer for DMN decision tables."""

    def __init__(self, config: DecisionTableConfig | None = None):
        self.config = config or DecisionTableConfig()

    def write(self, rules: Sequence[Rule], file_path: str | Path | None = None) -> str:
        """Render rules as DMN XML, optionally saving it to ``file_path``."""
        inputs, outputs = collect_variables(rules)
        lines = []

        self._write_header(lines)
        self._write_inputs(lines, inputs)
        self._write_outputs(lines, outputs)
        for rule in rules:
            self._write_rule(lines, rule, inputs, outputs)
        self._write_footer(lines)

        content = "\n".join(lines) + "\n"
        logger.debug(
            "Built decision %s: %d inputs, %d outputs, %d rules",
            self.config.decision_id, len(inputs), len(outputs), len(rules),
        )

        if file_path:
            path = Path(file_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        return content

    def _pad(self, level: int) -> str:
        return self.config.indent * level

    def _write_header(self, lines: list[str]) -> None:
        decision_id = escape_xml(self.config.decision_id)
        decision_name = escape_xml(self.config.decision_name)
        attr_pad = " " * len("<definitions ")

        lines.append('<?xml version="1.0" encoding="UTF-8"?>')
        lines.append(f'<definitions xmlns="{DMN_NAMESPACE}"')
        lines.append(f'{attr_pad}xmlns:dmndi="{DMNDI_NAMESPACE}"')
        lines.append(f'{attr_pad}xmlns:dc="{DC_NAMESPACE}"')
        lines.append(f'{attr_pad}xmlns:camunda="{CAMUNDA_NAMESPACE}"')
        lines.append(f'{attr_pad}id="definitions_{decision_id}"')
        lines.append(f'{attr_pad}name="{decision_name}"')
        lines.append(f'{attr_pad}namespace="{escape_xml(self.config.namespace)}">')
        lines.append("")
        lines.append(f'{self._pad(1)}<decision id="{decision_id}" name="{decision_name}">')
        lines.append(
            f'{self._pad(2)}<decisionTable id="decisionTable_{decision_id}" '
            f'hitPolicy="{HIT_POLICY}">'
        )

    def _write_inputs(self, lines: list[str], inputs: list[str]) -> None:
        for variable in inputs:
            var = escape_xml(variable)
            lines.append(f'{self._pad(3)}<input id="input_{var}" label="{var}">')
            lines.append(
                f'{self._pad(4)}<inputExpression id="inputExpression_{var}" typeRef="string">'
            )
            lines.append(f"{self._pad(5)}<text>{var}</text>")
            lines.append(f"{self._pad(4)}</inputExpression>")
            lines.append(f"{self._pad(3)}</input>")

    def _write_outputs(self, lines: list[str], outputs: list[str]) -> None:
        for variable in outputs:
            var = escape_xml(variable)
            lines.append(
                f'{self._pad(3)}<output id="output_{var}" label="{var}" '
                f'name="{var}" typeRef="string" />'
            )

    def _write_rule(
        self,
        lines: list[str],
        rule: Rule,
        inputs: list[str],
        outputs: list[str],
    ) -> None:
        rule_id = escape_xml(rule.id)
        lines.append(f'{self._pad(3)}<rule id="{rule_id}">')

        for variable in inputs:
            expression = input_entry(rule.condition_for(variable))
            self._write_entry(lines, "inputEntry", f"{rule_id}_{escape_xml(variable)}", expression)

        for variable in outputs:
            value = output_entry(rule.action_for(variable))
            self._write_entry(lines, "outputEntry", f"{rule_id}_{escape_xml(variable)}", value)

        lines.append(f"{self._pad(3)}</rule>")

    def _write_entry(self, lines: list[str], tag: str, suffix: str, text: str) -> None:
        lines.append(f'{self._pad(4)}<{tag} id="{tag}_{suffix}">')
        lines.append(f"{self._pad(5)}<text>{escape_xml(text)}</text>")
        lines.append(f"{self._pad(4)}</{tag}>")

    def _write_footer(self, lines: list[str]) -> None:
        lines.append(f"{self._pad(2)}</decisionTable>")
        lines.append(f"{self._pad(1)}</decision>")
        lines.append("</definitions>")


def build(
    rules: Sequence[Rule],
    decision_name: str = "Decision",
    decision_id: str = "decision_1",
) -> str:
    """Build DMN XML for ``rules``."""
    config = DecisionTableConfig(decision_name=decision_name, decision_id=decision_id)
    return DMNWriter(config).write(rules)


def write_dmn(
    rules: Sequence[Rule],
    file_path: str | Path | None = None,
    config: DecisionTableConfig | None = None,
) -> str:
    """
    Write rules to DMN format.

    Args:
        rules: The rules, in hit-policy order
        file_path: Optional path to write the DMN file
        config: Optional decision naming/formatting

    Returns:
        The DMN content as a string
    """
    return DMNWriter(config).write(rules, file_path)
