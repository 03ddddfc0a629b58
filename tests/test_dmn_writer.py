"""Tests for the DMN writer."""

import xml.etree.ElementTree as ET

import pytest
from nl_to_dmn.dmn_writer import (
    DMN_NAMESPACE,
    CAMUNDA_NAMESPACE,
    DMNWriter,
    DecisionTableConfig,
    build,
    write_dmn,
)


NS = {"dmn": DMN_NAMESPACE}


def parse_xml(content: str) -> ET.Element:
    return ET.fromstring(content.encode("utf-8"))


def entry_texts(rule_el: ET.Element, tag: str) -> list[str]:
    return [el.find("dmn:text", NS).text for el in rule_el.findall(f"dmn:{tag}", NS)]


class TestDMNStructure:
    """Test the overall document layout."""

    @pytest.fixture
    def root(self, order_rules):
        return parse_xml(build(order_rules, "Order Processing", "order_processing"))

    def test_definitions_root(self, root):
        assert root.tag == f"{{{DMN_NAMESPACE}}}definitions"
        assert root.get("id") == "definitions_order_processing"
        assert root.get("name") == "Order Processing"
        assert root.get("namespace") == CAMUNDA_NAMESPACE

    def test_single_decision_with_first_hit_policy(self, root):
        decisions = root.findall("dmn:decision", NS)
        assert len(decisions) == 1
        assert decisions[0].get("id") == "order_processing"

        tables = decisions[0].findall("dmn:decisionTable", NS)
        assert len(tables) == 1
        assert tables[0].get("hitPolicy") == "FIRST"

    def test_inputs_in_first_seen_order(self, root):
        inputs = root.findall(".//dmn:input", NS)
        assert [i.get("id") for i in inputs] == [
            "input_customer",
            "input_total_amount",
            "input_the_order",
            "input_any_item_price",
            "input_customer_membership",
            "input_total_quantity",
            "input_1",
        ]

    def test_input_expression(self, root):
        first = root.find(".//dmn:input", NS)
        expression = first.find("dmn:inputExpression", NS)
        assert expression.get("typeRef") == "string"
        assert expression.find("dmn:text", NS).text == "customer"

    def test_outputs(self, root):
        outputs = root.findall(".//dmn:output", NS)
        assert [o.get("name") for o in outputs] == ["discount", "priority_shipping", "risklevel"]
        assert all(o.get("typeRef") == "string" for o in outputs)
        assert outputs[0].get("id") == "output_discount"

    def test_one_rule_element_per_rule_in_order(self, root, order_rules):
        rules = root.findall(".//dmn:rule", NS)
        assert [r.get("id") for r in rules] == [r.id for r in order_rules]


class TestDMNEntries:
    """Test the input and output cells of each rule row."""

    @pytest.fixture
    def rule_elements(self, order_rules):
        return parse_xml(build(order_rules)).findall(".//dmn:rule", NS)

    def test_first_rule_entries(self, rule_elements):
        assert entry_texts(rule_elements[0], "inputEntry") == [
            '"platinum"', "> 3000", "-", "-", "-", "-", "-",
        ]
        assert entry_texts(rule_elements[0], "outputEntry") == ['"25%"', "true", '"Low"']

    def test_range_entry(self, rule_elements):
        assert entry_texts(rule_elements[1], "inputEntry")[1] == "[1000..3000]"

    def test_contains_entry(self, rule_elements):
        assert entry_texts(rule_elements[2], "inputEntry")[2] == 'contains(., "electronics")'

    def test_list_entry(self, rule_elements):
        assert entry_texts(rule_elements[4], "inputEntry")[4] == '["silver", "bronze"]'

    def test_missing_outputs_are_null(self, rule_elements):
        assert entry_texts(rule_elements[4], "outputEntry") == ['"5%"', "null", "null"]

    def test_default_rule_uses_always_true_column(self, rule_elements):
        assert entry_texts(rule_elements[5], "inputEntry") == [
            "-", "-", "-", "-", "-", "-", "1",
        ]

    def test_entry_ids(self, rule_elements, order_rules):
        first = rule_elements[0]
        rule_id = order_rules[0].id
        assert first.find("dmn:inputEntry", NS).get("id") == f"inputEntry_{rule_id}_customer"
        assert first.find("dmn:outputEntry", NS).get("id") == f"outputEntry_{rule_id}_discount"


class TestDMNDeterminism:
    def test_same_rules_same_bytes(self, order_rules):
        assert build(order_rules) == build(order_rules)

    def test_writer_instances_agree(self, order_rules):
        config = DecisionTableConfig(decision_name="Orders", decision_id="orders")
        assert DMNWriter(config).write(order_rules) == DMNWriter(config).write(order_rules)


class TestDMNEscaping:
    def test_special_characters_in_values(self, parser):
        rules = [parser.parse('If note is a<b & c, label is "x&y\'s".')]
        content = build(rules)

        assert "a<b" not in content
        rule_el = parse_xml(content).find(".//dmn:rule", NS)
        assert entry_texts(rule_el, "inputEntry") == ['"a<b & c"']
        assert entry_texts(rule_el, "outputEntry") == ['"x&y\'s"']

    def test_special_characters_in_decision_name(self, order_rules):
        root = parse_xml(build(order_rules, decision_name='R&D "<rules>"'))
        assert root.get("name") == 'R&D "<rules>"'
        assert root.find("dmn:decision", NS).get("name") == 'R&D "<rules>"'


class TestWriteDmn:
    def test_writes_file(self, tmp_path, order_rules):
        path = tmp_path / "nested" / "orders.dmn"
        content = write_dmn(order_rules, path)

        assert path.exists()
        assert path.read_text(encoding="utf-8") == content

    def test_returns_content_without_path(self, order_rules):
        content = write_dmn(order_rules)
        assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert content.endswith("</definitions>\n")

    def test_custom_indent(self, order_rules):
        config = DecisionTableConfig(indent="    ")
        content = DMNWriter(config).write(order_rules)
        assert '\n    <decision id="decision_1" name="Decision">' in content
