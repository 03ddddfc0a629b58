"""Shared fixtures."""

import itertools

import pytest

from nl_to_dmn.rule_parser import RuleParser


ORDER_RULES = """\
# Order processing rules
If customer is platinum and total amount > 3000, discount is 25% and priority shipping is true and riskLevel is "Low".
If customer is gold and total amount between 1000 and 3000, discount is 15% and priority shipping is true and riskLevel is "Medium".
If the order contains any electronics and total amount > 1500, discount is 10% and priority shipping is true and riskLevel is "High".
If any item price > 2000, riskLevel is "Critical" and priority shipping is true.
If customer membership in (silver, bronze) and total quantity >= 5, discount is 5%.
Otherwise, discount is 0% and priority shipping is false and riskLevel is "Low".
"""


def counting_id_factory():
    counter = itertools.count(1)
    return lambda prefix: f"{prefix}_{next(counter)}"


@pytest.fixture
def parser():
    """Parser that hands out rule_1, rule_2, ... instead of random ids."""
    return RuleParser(id_factory=counting_id_factory())


@pytest.fixture
def order_rules_text():
    return ORDER_RULES


@pytest.fixture
def order_rules(parser, order_rules_text):
    return parser.parse_text(order_rules_text).rules
