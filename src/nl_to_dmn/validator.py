"""
DMN sanity checks.

Cheap structural checks on generated DMN text: required elements, balanced
root tags, namespace and hit policy, plus an XML well-formedness parse. This is
not a schema validator.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Errors make a document invalid; warnings do not."""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class DMNValidator:
    """Validates the structure of DMN XML text."""

    REQUIRED_ELEMENTS = {
        "<definitions": "Missing <definitions> root element",
        "<decision": "Missing <decision> element",
        "<decisionTable": "Missing <decisionTable> element",
    }

    BALANCED_TAGS = [
        ("<definitions", "</definitions>", "Unbalanced <definitions> tags"),
        ("<decision ", "</decision>", "Unbalanced <decision> tags"),
    ]

    def validate(self, dmn_xml: str | None) -> ValidationResult:
        result = ValidationResult()

        if dmn_xml is None or not dmn_xml.strip():
            result.errors.append("DMN XML is empty")
            return result

        if not dmn_xml.lstrip().startswith("<?xml"):
            result.warnings.append("Missing XML declaration")

        for marker, message in self.REQUIRED_ELEMENTS.items():
            if marker not in dmn_xml:
                result.errors.append(message)

        for opening, closing, message in self.BALANCED_TAGS:
            if dmn_xml.count(opening) != dmn_xml.count(closing):
                result.errors.append(message)

        if "https://www.omg.org/spec/DMN" not in dmn_xml:
            result.warnings.append("Missing OMG DMN namespace")

        if "hitPolicy=" not in dmn_xml:
            result.warnings.append("Missing hit policy attribute")

        try:
            ET.fromstring(dmn_xml.strip().encode("utf-8"))
        except ET.ParseError as e:
            result.errors.append(f"Malformed XML: {e}")

        for warning in result.warnings:
            logger.debug("DMN validation warning: %s", warning)

        return result


def validate_dmn(dmn_xml: str | None) -> ValidationResult:
    """Convenience function to validate DMN text."""
    return DMNValidator().validate(dmn_xml)
