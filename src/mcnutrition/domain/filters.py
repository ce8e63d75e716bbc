"""Nutritional filter criteria and filter state."""

from dataclasses import dataclass
from typing import Literal

from mcnutrition.domain.menu import MenuItem

NotableDirection = Literal["at_least", "at_most"]


@dataclass(frozen=True)
class NutrientRange:
    """Inclusive bounds for the active nutritional filter."""

    minimum: int
    maximum: int


@dataclass(frozen=True)
class Highlight:
    """Presentational flag carrying the value that made an item notable."""

    criterion: str
    value: int
    label: str


@dataclass(frozen=True)
class FilterCriterion:
    """One nutritional filter dimension with its slider bounds."""

    key: str
    display_name: str
    description: str
    field: str
    unit: str
    absolute_min: int
    absolute_max: int
    default_min: int
    default_max: int
    notable_threshold: int
    notable_direction: NotableDirection
    highlight_suffix: str

    def __post_init__(self) -> None:
        if not (
            self.absolute_min
            <= self.default_min
            <= self.default_max
            <= self.absolute_max
        ):
            raise ValueError(f"Invalid bounds for filter criterion {self.key}")

    @property
    def default_range(self) -> NutrientRange:
        return NutrientRange(self.default_min, self.default_max)

    def value(self, item: MenuItem) -> int:
        """Return the whole-number value this criterion filters on."""
        return int(item.nutrient(self.field))

    def matches(self, item: MenuItem, minimum: int, maximum: int) -> bool:
        """Return true when the item's value lies within the inclusive range."""
        return minimum <= self.value(item) <= maximum

    def clamp(self, value: int) -> int:
        """Clamp a slider value into the criterion's absolute bounds."""
        return max(self.absolute_min, min(self.absolute_max, value))

    def highlight(self, item: MenuItem) -> Highlight | None:
        """Return a highlight when the item passes the notable threshold."""
        value = self.value(item)
        if self.notable_direction == "at_least":
            notable = value >= self.notable_threshold
        else:
            notable = value <= self.notable_threshold
        if not notable:
            return None
        return Highlight(
            criterion=self.key,
            value=value,
            label=f"{value}{self.highlight_suffix}",
        )


FILTER_CRITERIA: dict[str, FilterCriterion] = {
    criterion.key: criterion
    for criterion in (
        FilterCriterion(
            key="calorie-conscious",
            display_name="Calorie Conscious",
            description="Filter by calorie range",
            field="CAL",
            unit="cal",
            absolute_min=0,
            absolute_max=1500,
            default_min=0,
            default_max=400,
            notable_threshold=400,
            notable_direction="at_most",
            highlight_suffix=" cal",
        ),
        FilterCriterion(
            key="high-protein",
            display_name="High Protein",
            description="Filter by protein range",
            field="PRO",
            unit="g protein",
            absolute_min=0,
            absolute_max=100,
            default_min=20,
            default_max=100,
            notable_threshold=20,
            notable_direction="at_least",
            highlight_suffix="g protein",
        ),
        FilterCriterion(
            key="low-carb",
            display_name="Low Carb / Carb Smart",
            description="Filter by carbohydrate range",
            field="CARB",
            unit="g carbs",
            absolute_min=0,
            absolute_max=150,
            default_min=0,
            default_max=20,
            notable_threshold=20,
            notable_direction="at_most",
            highlight_suffix="g carbs",
        ),
        FilterCriterion(
            key="low-sugar",
            display_name="Low Sugar",
            description="Filter by sugar range",
            field="SGR",
            unit="g sugar",
            absolute_min=0,
            absolute_max=120,
            default_min=0,
            default_max=10,
            notable_threshold=10,
            notable_direction="at_most",
            highlight_suffix="g sugar",
        ),
        FilterCriterion(
            key="gut-friendly",
            display_name="Gut Friendly",
            description="Filter by fiber range",
            field="FBR",
            unit="g fiber",
            absolute_min=0,
            absolute_max=20,
            default_min=5,
            default_max=20,
            notable_threshold=5,
            notable_direction="at_least",
            highlight_suffix="g fiber",
        ),
    )
}


@dataclass
class FilterState:
    """Current category, nutritional filter and search selections."""

    active_category: str | None = None
    active_filter: str | None = None
    range: NutrientRange | None = None
    search_term: str = ""

    @property
    def normalized_search(self) -> str:
        return self.search_term.strip().lower()
