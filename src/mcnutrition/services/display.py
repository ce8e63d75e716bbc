"""Display helpers for menu item names and portion sizes."""

import re
from dataclasses import dataclass

from mcnutrition.domain.menu import OUNCE_CATEGORIES

_NUMBER = r"(\d+(?:\.\d+)?)"


@dataclass(frozen=True)
class _PortionPattern:
    regex: re.Pattern[str]
    kind: str


# Tried in order; the first match is stripped from the name.
_PATTERNS: tuple[_PortionPattern, ...] = (
    _PortionPattern(
        re.compile(rf"\s*{_NUMBER}\s*fl\s*oz\s*cup\s*\(\s*{_NUMBER}\s*g\s*\)", re.I),
        "fl_oz",
    ),
    _PortionPattern(
        re.compile(rf"\s*\(\s*{_NUMBER}\s*fl\s*oz\s*cup\s*\)", re.I), "fl_oz"
    ),
    _PortionPattern(
        re.compile(rf"\s*{_NUMBER}\s*fl\s*oz(?:\s*cup)?\b", re.I), "fl_oz"
    ),
    _PortionPattern(
        re.compile(rf"\s*{_NUMBER}\s*oz\s*\(\s*{_NUMBER}\s*g\s*\)\s*$", re.I),
        "oz_g",
    ),
    _PortionPattern(
        re.compile(rf"\s*\d+\s*cookies?\s*\(\s*{_NUMBER}\s*g\s*\)", re.I), "g"
    ),
    _PortionPattern(re.compile(rf"\s*\(\s*{_NUMBER}\s*g\s*\)\s*$", re.I), "g"),
    _PortionPattern(re.compile(rf"\s+{_NUMBER}\s*g\s*$", re.I), "g"),
    _PortionPattern(re.compile(rf"\s*\(\s*{_NUMBER}\s*oz\s*\)\s*$", re.I), "oz"),
    _PortionPattern(re.compile(rf"\s+{_NUMBER}\s*oz\s*$", re.I), "oz"),
)


@dataclass(frozen=True)
class DisplayName:
    """A menu name with its portion suffix split out."""

    name: str
    grams: str | None = None
    ounces: str | None = None
    fluid_ounces: str | None = None
    quantity: str | None = None


def parse_item_name(name: str, category: str = "") -> DisplayName:
    """Strip the first matching portion suffix and pick the unit to display."""
    for pattern in _PATTERNS:
        match = pattern.regex.search(name)
        if match is None:
            continue
        cleaned = (name[: match.start()] + name[match.end() :]).strip()
        if pattern.kind == "fl_oz":
            value = match.group(1)
            return DisplayName(
                name=cleaned, fluid_ounces=value, quantity=f"{value} fl oz"
            )
        if pattern.kind == "oz_g":
            ounces, grams = match.group(1), match.group(2)
            quantity = (
                f"{ounces} oz" if category in OUNCE_CATEGORIES else f"{grams} g"
            )
            return DisplayName(
                name=cleaned, grams=grams, ounces=ounces, quantity=quantity
            )
        if pattern.kind == "g":
            grams = match.group(1)
            return DisplayName(name=cleaned, grams=grams, quantity=f"{grams} g")
        ounces = match.group(1)
        return DisplayName(name=cleaned, ounces=ounces, quantity=f"{ounces} oz")
    return DisplayName(name=name)
