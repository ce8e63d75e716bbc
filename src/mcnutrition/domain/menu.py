"""Domain models for menu records."""

import math
import re
from dataclasses import dataclass

# Wire key -> attribute name. Order matches the nutrition panel.
NUTRIENT_FIELDS: dict[str, str] = {
    "CAL": "calories",
    "PRO": "protein",
    "CARB": "carbs",
    "FAT": "fat",
    "SFAT": "saturated_fat",
    "TFAT": "trans_fat",
    "CHOL": "cholesterol",
    "SALT": "sodium",
    "FBR": "fiber",
    "SGR": "sugar",
}

CATEGORY_NAMES: dict[str, str] = {
    "BURGERSANDWICH": "Burgers & Sandwiches",
    "CHICKENFISH": "Chicken & Fish",
    "BREAKFAST": "Breakfast",
    "SALAD": "Salads",
    "SNACKSIDE": "Snacks & Sides",
    "BEVERAGE": "Beverages",
    "MCCAFE": "McCafé",
    "DESSERTSHAKE": "Desserts & Shakes",
    "CONDIMENT": "Condiments",
    "ALLDAYBREAKFAST": "All Day Breakfast",
}

# Categories whose portions read better in ounces than grams.
OUNCE_CATEGORIES = frozenset({"BEVERAGE", "DESSERTSHAKE", "CONDIMENT"})

_CAPITAL = re.compile(r"([A-Z])")


@dataclass(frozen=True)
class MenuItem:
    """A single menu record with string-encoded nutrition values."""

    name: str
    category: str
    calories: str = "0"
    protein: str = "0"
    carbs: str = "0"
    fat: str = "0"
    saturated_fat: str = "0"
    trans_fat: str = "0"
    cholesterol: str = "0"
    sodium: str = "0"
    fiber: str = "0"
    sugar: str = "0"
    serving_size: str | None = None
    id: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, object]) -> "MenuItem":
        """Build an item from a wire/database record keyed by ITEM, CATEGORY, CAL..."""
        nutrients = {
            attribute: _as_text(record.get(key))
            for key, attribute in NUTRIENT_FIELDS.items()
        }
        serving = record.get("SERV_SIZE")
        record_id = record.get("id")
        return cls(
            name=str(record.get("ITEM") or ""),
            category=str(record.get("CATEGORY") or ""),
            serving_size=str(serving) if serving is not None else None,
            id=str(record_id) if record_id is not None else None,
            **nutrients,
        )

    def to_record(self) -> dict[str, object]:
        """Serialize back to the wire/database shape."""
        record: dict[str, object] = {"ITEM": self.name, "CATEGORY": self.category}
        for key, attribute in NUTRIENT_FIELDS.items():
            record[key] = getattr(self, attribute)
        if self.serving_size is not None:
            record["SERV_SIZE"] = self.serving_size
        if self.id is not None:
            record["id"] = self.id
        return record

    def nutrient(self, key: str) -> float:
        """Return a parsed nutrient value by wire key, 0 when unparseable."""
        return parse_nutrient(getattr(self, NUTRIENT_FIELDS[key]))


def parse_nutrient(raw: object) -> float:
    """Parse a string-encoded number, returning 0 for absent or malformed input."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, int | float):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def format_category_name(category: str) -> str:
    """Return the display name for a category key."""
    if category in CATEGORY_NAMES:
        return CATEGORY_NAMES[category]
    return _CAPITAL.sub(r" \1", category).strip()


def _as_text(value: object) -> str:
    if value is None:
        return "0"
    return str(value)
