"""Tests for sample rule generation."""

import random
import string

import pytest
from nl_to_dmn.generators import (
    DEFAULT_RULE,
    RULE_TEMPLATES,
    VALUE_POOLS,
    fill_template,
    generate_rule_lines,
    generate_sample_files,
)
from nl_to_dmn.rule_parser import parse_many, parse_rule


class TestTemplates:
    @pytest.mark.parametrize("template", RULE_TEMPLATES)
    def test_every_template_parses(self, template):
        rng = random.Random(1)
        for _ in range(20):
            rule = parse_rule(fill_template(template, rng))
            assert rule.conditions
            assert rule.actions

    def test_default_rule_parses(self):
        assert parse_rule(DEFAULT_RULE).is_default

    def test_every_placeholder_has_a_pool(self):
        for template in RULE_TEMPLATES:
            for _, name, _, _ in string.Formatter().parse(template):
                if name:
                    assert name in VALUE_POOLS

    def test_repeated_placeholder_gets_same_value(self):
        filled = fill_template("{qty} and {qty}", random.Random(3))
        left, right = filled.split(" and ")
        assert left == right

    def test_range_values_stay_in_bounds(self):
        rng = random.Random(5)
        for _ in range(50):
            value = int(fill_template("{age}", rng))
            assert 18 <= value <= 65


class TestGenerateRuleLines:
    def test_count_plus_default(self):
        lines = generate_rule_lines(5, random.Random(0))
        assert len(lines) == 6
        assert lines[-1] == DEFAULT_RULE

    def test_seed_is_reproducible(self):
        assert generate_rule_lines(10, random.Random(42)) == generate_rule_lines(10, random.Random(42))

    def test_zero_rules(self):
        assert generate_rule_lines(0, random.Random(0)) == [DEFAULT_RULE]


class TestGenerateSampleFiles:
    def test_writes_numbered_files(self, tmp_path):
        paths = generate_sample_files(tmp_path / "rules", 3, rules_per_file=4, seed=1)

        assert [p.name for p in paths] == ["rules_001.txt", "rules_002.txt", "rules_003.txt"]
        assert all(p.exists() for p in paths)

    def test_file_contents(self, tmp_path):
        path = generate_sample_files(tmp_path, 1, rules_per_file=4, seed=1)[0]
        lines = path.read_text().splitlines()

        assert lines[0] == "# Generated sample rules (4 rules + default)"
        assert len(lines) == 6
        assert len(parse_many(path.read_text())) == 5

    def test_random_rule_count(self, tmp_path):
        for path in generate_sample_files(tmp_path, 5, seed=9):
            rules = parse_many(path.read_text())
            assert 6 <= len(rules) <= 21

    def test_seed_is_reproducible(self, tmp_path):
        first = generate_sample_files(tmp_path / "a", 2, seed=7)
        second = generate_sample_files(tmp_path / "b", 2, seed=7)
        assert [p.read_text() for p in first] == [p.read_text() for p in second]
