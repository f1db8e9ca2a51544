"""
Parsing of the nine-line nutrient report returned by Claude.

Each field is matched on its own, so a partly garbled report still yields
every value that can be read and 0 for the rest.
"""

import re

from line_health_agent.models import NUTRIENTS, NutrientVector, to_amount

_FIELD_PATTERNS = {
    attr: re.compile(re.escape(label) + r"\s*[:：]\s*([\d.]+)")
    for attr, label, _ in NUTRIENTS
}


def parse_nutrient_report(text: str) -> NutrientVector:
    """Read nutrient amounts out of a `label: value unit` report."""
    values = {}
    for attr, pattern in _FIELD_PATTERNS.items():
        match = pattern.search(text or "")
        values[attr] = to_amount(match.group(1)) if match else 0.0
    return NutrientVector(**values)


def report_template() -> str:
    """The report layout Claude is asked to reproduce, one nutrient per line."""
    return "\n".join(f"{label}: xx {unit}" for _, label, unit in NUTRIENTS)
