# Per-image adjustment values
from copy import deepcopy
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping

from ..config import settings
from ..utils.logger import get_logger
from .curves import CurveModel, clamp_round

logger = get_logger(__name__)

SLIDERS = ('exposure', 'contrast', 'highlights', 'shadows', 'whites', 'blacks')


def clamp_slider(value) -> int:
    """Round and clamp a slider value into [SLIDER_MIN, SLIDER_MAX]."""
    return clamp_round(value, settings.SLIDER_MIN, settings.SLIDER_MAX)


@dataclass
class Adjustments:
    """Tonal adjustments for one image: six sliders plus four tone curves."""
    exposure: int = 0
    contrast: int = 0
    highlights: int = 0
    shadows: int = 0
    whites: int = 0
    blacks: int = 0
    curves: CurveModel = field(default_factory=CurveModel)

    def __post_init__(self):
        for name in SLIDERS:
            setattr(self, name, clamp_slider(getattr(self, name)))

    @classmethod
    def default(cls) -> 'Adjustments':
        return cls()

    def is_default(self) -> bool:
        return all(getattr(self, name) == 0 for name in SLIDERS) and self.curves.is_identity()

    def get_slider(self, name: str) -> int:
        if name not in SLIDERS:
            raise ValueError(f"Unknown slider '{name}'")
        return getattr(self, name)

    def set_slider(self, name: str, value) -> int:
        """Set a slider, clamping out-of-range input. Returns the stored value."""
        if name not in SLIDERS:
            raise ValueError(f"Unknown slider '{name}'")
        clamped = clamp_slider(value)
        setattr(self, name, clamped)
        return clamped

    def sliders(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in SLIDERS}

    def copy(self) -> 'Adjustments':
        return deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = self.sliders()
        data['curves'] = self.curves.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Adjustments':
        """Build from stored data.

        Missing sliders default to 0 and a missing ``curves`` key (data saved
        before curve support) back-fills identity curves.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Adjustments must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.debug("Ignoring unknown adjustment keys: %s", sorted(unknown))
        values = {name: data.get(name, 0) for name in SLIDERS}
        return cls(curves=CurveModel.from_dict(data.get('curves')), **values)
