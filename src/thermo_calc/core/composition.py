"""
Gas compositions and the preset catalog.

A composition is an immutable set of mole fractions keyed by component name.
The catalog maps the named presets offered in the gas menu to their
compositions. Component names are lowercase identifiers ("nitrogen",
"carbon_dioxide"); engines translate them to their own naming.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Mapping

import numpy as np

from thermo_calc.core.errors import CompositionError, UnknownGas

logger = logging.getLogger(__name__)

# Tolerance on the sum of mole fractions
FRACTION_SUM_TOLERANCE = 1e-6


@dataclass(frozen=True)
class GasComposition:
    """
    Mole fractions of a gas mixture.

    Components with zero fraction are dropped by from_fractions, and items
    are kept sorted by component name, so two compositions compare equal
    whenever they describe the same mixture.

    Attributes:
        items: (component, mole fraction) pairs sorted by component name

    Example:
        >>> air = GasComposition.from_fractions(
        ...     {"nitrogen": 0.78, "oxygen": 0.21, "argon": 0.01}
        ... )
        >>> air["oxygen"]
        0.21
        >>> air["methane"]
        0.0
    """

    items: tuple[tuple[str, float], ...]

    def __post_init__(self):
        names = [name for name, _ in self.items]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise CompositionError(
                f"Duplicate components: {', '.join(duplicates)}"
            )
        object.__setattr__(self, "items", tuple(sorted(self.items)))

    @classmethod
    def from_fractions(
        cls,
        fractions: Mapping[str, float],
        validate: bool = True,
    ) -> GasComposition:
        """
        Build a composition from a component -> mole fraction mapping.

        Args:
            fractions: Mole fraction of each component
            validate: If True, require fractions in [0, 1] summing to 1

        Raises:
            CompositionError: If two names differ only in case, or if
                validation fails
        """
        items = tuple(
            (name.lower(), float(x)) for name, x in fractions.items() if x != 0
        )
        composition = cls(items=items)
        if validate:
            composition.validate()
        return composition

    def __getitem__(self, component: str) -> float:
        return dict(self.items).get(component, 0.0)

    def __iter__(self) -> Iterator[str]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def components(self) -> list[str]:
        """Component names with non-zero fraction."""
        return [name for name, _ in self.items]

    @property
    def fractions(self) -> np.ndarray:
        """Mole fractions in component order."""
        return np.array([x for _, x in self.items], dtype=float)

    @property
    def total(self) -> float:
        """Sum of all mole fractions."""
        return float(np.sum(self.fractions))

    def is_normalized(self, tolerance: float = FRACTION_SUM_TOLERANCE) -> bool:
        """Check that fractions sum to 1 within tolerance."""
        return bool(np.isclose(self.total, 1.0, rtol=0.0, atol=tolerance))

    def validate(self, tolerance: float = FRACTION_SUM_TOLERANCE) -> None:
        """
        Check the composition can be handed to an equation of state.

        Raises:
            CompositionError: If empty, any fraction is outside [0, 1], or the
                fractions do not sum to 1 within tolerance
        """
        if not self.items:
            raise CompositionError("Composition has no components")
        fractions = self.fractions
        if np.any(fractions < 0.0) or np.any(fractions > 1.0):
            raise CompositionError(
                f"Mole fractions must lie in [0, 1], got {self.as_dict()}"
            )
        if not self.is_normalized(tolerance):
            raise CompositionError(
                f"Mole fractions sum to {self.total:.6f}, expected 1.0"
            )

    def normalized(self) -> GasComposition:
        """Return a copy scaled so the fractions sum to exactly 1."""
        total = self.total
        if total <= 0:
            raise CompositionError("Cannot normalize a composition with zero total")
        scaled = self.fractions / total
        return GasComposition(
            items=tuple(zip(self.components, (float(x) for x in scaled)))
        )

    def as_dict(self) -> dict[str, float]:
        """Component -> mole fraction as a plain dict."""
        return dict(self.items)

    def __str__(self) -> str:
        return ", ".join(f"{name} {x:.4f}" for name, x in self.items)


# =============================================================================
# Preset catalog
# =============================================================================

class GasPreset(Enum):
    """Named gas mixtures offered in the gas menu, in menu order."""

    AIR = "Air"
    ARGON = "Argon"
    NITROGEN = "Nitrogen"
    OXYGEN = "Oxygen"

    @property
    def display_name(self) -> str:
        return self.value


_PRESET_FRACTIONS: dict[GasPreset, dict[str, float]] = {
    GasPreset.AIR: {"nitrogen": 0.78, "oxygen": 0.21, "argon": 0.01},
    GasPreset.ARGON: {"argon": 1.0},
    GasPreset.NITROGEN: {"nitrogen": 1.0},
    GasPreset.OXYGEN: {"oxygen": 1.0},
}

PRESETS: dict[GasPreset, GasComposition] = {
    preset: GasComposition.from_fractions(fractions)
    for preset, fractions in _PRESET_FRACTIONS.items()
}


def lookup(name: str | GasPreset) -> GasComposition:
    """
    Get the composition for a named preset.

    Args:
        name: A GasPreset, or its display name (case-insensitive)

    Returns:
        GasComposition for the preset

    Raises:
        UnknownGas: If the name is not in the catalog
    """
    return PRESETS[resolve_preset(name)]


def resolve_preset(name: str | GasPreset) -> GasPreset:
    """Map a preset or display name to its GasPreset member."""
    if isinstance(name, GasPreset):
        return name
    for preset in GasPreset:
        if preset.value.lower() == str(name).strip().lower():
            return preset
    available = ", ".join(p.value for p in GasPreset)
    raise UnknownGas(f"Unknown gas '{name}'. Available: {available}")


def menu_choices() -> list[tuple[str, GasPreset]]:
    """Menu keys ("1", "2", ...) paired with the preset they select."""
    return [(str(i), preset) for i, preset in enumerate(GasPreset, start=1)]
