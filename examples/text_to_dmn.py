#!/usr/bin/env python3
"""
Example: Rule text → IR → DMN Workflow

This script demonstrates:
1. Parsing plain-English rules, including a line that fails
2. Inspecting the IR (Intermediate Representation)
3. Building and validating a DMN decision table
4. Writing an Excel view of the same table
"""

from pathlib import Path
import sys

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nl_to_dmn.rule_parser import RuleParser
from nl_to_dmn.dmn_writer import DecisionTableConfig, write_dmn
from nl_to_dmn.validator import validate_dmn
from nl_to_dmn.excel_writer import write_excel


def main():
    rules_path = Path(__file__).parent / "rules" / "order_rules.txt"
    output_dir = Path(__file__).parent / "output"

    print("=" * 60)
    print("Rule Text → IR → DMN Converter Demo")
    print("=" * 60)

    # Step 1: Parse the rule file, plus one line that is not a rule
    print("\n1. Parsing rule text...")
    text = rules_path.read_text() + "If customer gold, discount is 5%.\n"
    report = RuleParser().parse_text(text)

    print(f"   Rules:       {len(report.rules)}")
    print(f"   Diagnostics: {len(report.diagnostics)}")
    for result in report.diagnostics:
        print(f"      line {result.line_number}: {result.error}")

    # Step 2: Inspect the IR
    print("\n2. Inspecting rules in IR:")
    for rule in report.rules:
        print(f"\n   Rule: {rule.id}{' (default)' if rule.is_default else ''}")
        for cond in rule.conditions:
            print(f"      Condition: {cond}")
        for action in rule.actions:
            print(f"      Action:    {action}")

    # Step 3: Build and validate DMN
    print("\n3. Generating DMN output:")
    print("-" * 60)
    config = DecisionTableConfig(decision_name="Order Processing", decision_id="order_processing")
    dmn_path = output_dir / "order_rules.dmn"
    content = write_dmn(report.rules, dmn_path, config)
    print(content)
    print("-" * 60)

    validation = validate_dmn(content)
    print(f"\n   Valid: {validation.is_valid}")
    for warning in validation.warnings:
        print(f"   Warning: {warning}")

    # Step 4: Excel view
    excel_path = output_dir / "order_rules.xlsx"
    write_excel(report.rules, excel_path, config.decision_name)

    print(f"\n✓ DMN saved to: {dmn_path}")
    print(f"✓ Excel view saved to: {excel_path}")


if __name__ == "__main__":
    main()
