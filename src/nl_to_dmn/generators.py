"""
Sample rule generation.

Produces random but well-formed rule text files for exercising the parser and
the batch converter at volume.
"""

import logging
import random
from pathlib import Path
from string import Formatter


logger = logging.getLogger(__name__)


# =============================================================================
# Templates and value pools
# =============================================================================

RULE_TEMPLATES = [
    "If customer_type is {type} and order_amount > {amount}, discount is {discount}% and priority is {priority}.",
    "If product_category is {category} and quantity >= {qty}, shipping_cost is {cost} and delivery_time is {time}.",
    "If user_age >= {age} and membership_level is {level}, access_level is {access} and trial_period is {trial}.",
    "If transaction_amount between {min} and {max}, risk_score is {risk} and approval_status is {status}.",
    "If region in ({region1}, {region2}) and total_value > {value}, tax_rate is {tax}%.",
    "If inventory_level < {threshold} and demand_forecast is {demand}, reorder_quantity is {qty} and priority is {priority}.",
    "If customer_segment is {segment} and purchase_frequency > {freq}, loyalty_points is {points} and tier is {tier}.",
    "If payment_method is {method} and transaction_type is {type}, processing_fee is {fee}% and settlement_time is {time}.",
]

DEFAULT_RULE = "Otherwise, status is default and action is none."

_TYPES = ["premium", "gold", "silver", "bronze", "standard"]
_LEVELS = ["basic", "standard", "premium", "enterprise"]
_PRIORITIES = ["high", "medium", "low"]
_REGIONS = ["north", "south", "east", "west", "central"]

# Placeholder -> list of choices or (low, high) integer range
VALUE_POOLS: dict[str, list[str] | tuple[int, int]] = {
    "type": _TYPES,
    "category": ["electronics", "clothing", "food", "books", "furniture"],
    "level": _LEVELS,
    "access": _LEVELS,
    "tier": _LEVELS,
    "priority": _PRIORITIES,
    "demand": _PRIORITIES,
    "risk": _PRIORITIES,
    "status": ["approved", "pending", "rejected", "review"],
    "segment": ["new", "regular", "vip", "inactive"],
    "method": ["credit_card", "debit_card", "paypal", "bank_transfer"],
    "region1": _REGIONS,
    "region2": _REGIONS,
    "amount": (100, 10000),
    "discount": (5, 50),
    "qty": (1, 100),
    "cost": (5, 50),
    "time": (1, 30),
    "age": (18, 65),
    "trial": (7, 90),
    "min": (100, 1000),
    "max": (2000, 10000),
    "value": (500, 5000),
    "tax": (5, 25),
    "threshold": (10, 100),
    "freq": (1, 50),
    "points": (100, 10000),
    "fee": (1, 5),
}


def _placeholders(template: str) -> set[str]:
    return {name for _, name, _, _ in Formatter().parse(template) if name}


def _draw(pool: list[str] | tuple[int, int], rng: random.Random) -> str:
    if isinstance(pool, tuple):
        return str(rng.randint(*pool))
    return rng.choice(pool)


def fill_template(template: str, rng: random.Random) -> str:
    """Replace every placeholder; repeated placeholders get the same value."""
    values = {name: _draw(VALUE_POOLS[name], rng) for name in _placeholders(template)}
    return template.format(**values)


def generate_rule_lines(count: int, rng: random.Random | None = None) -> list[str]:
    """
    Generate ``count`` random rule lines followed by a default rule.

    Example:
        >>> lines = generate_rule_lines(3, random.Random(7))
        >>> len(lines)
        4
    """
    rng = rng or random.Random()
    lines = [fill_template(rng.choice(RULE_TEMPLATES), rng) for _ in range(count)]
    lines.append(DEFAULT_RULE)
    return lines


def generate_sample_files(
    output_dir: str | Path,
    num_files: int,
    rules_per_file: int | None = None,
    seed: int | None = None,
) -> list[Path]:
    """
    Write ``num_files`` rule files named ``rules_001.txt``, ``rules_002.txt``...

    Args:
        output_dir: Directory to create the files in
        num_files: How many files to write
        rules_per_file: Rules per file; random between 5 and 20 when omitted
        seed: Seed for reproducible output

    Returns:
        Paths of the written files
    """
    rng = random.Random(seed)
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for idx in range(1, num_files + 1):
        count = rules_per_file if rules_per_file is not None else rng.randint(5, 20)
        lines = [f"# Generated sample rules ({count} rules + default)"]
        lines.extend(generate_rule_lines(count, rng))

        path = directory / f"rules_{idx:03d}.txt"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        written.append(path)

        if idx % 10 == 0:
            logger.info("Generated %d/%d files", idx, num_files)

    logger.info("Generated %d rule files in %s", num_files, directory)
    return written
