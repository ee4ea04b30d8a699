from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import DegenerateChord, InvalidParameters
from .profile import AirfoilProfile


def _require_finite(field: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameters(field, value, "finite")
    return value


@dataclass(frozen=True)
class WingParameters:
    """Planform of a straight-tapered, swept half wing."""

    semi_wingspan: float
    root_chord: float
    tip_chord: float
    sweep: float = 0.0

    def __post_init__(self) -> None:
        span = _require_finite("semi_wingspan", self.semi_wingspan)
        if span <= 0:
            raise InvalidParameters("semi_wingspan", span, "positive")
        object.__setattr__(self, "semi_wingspan", span)
        object.__setattr__(self, "sweep", _require_finite("sweep", self.sweep))
        for field in ("root_chord", "tip_chord"):
            chord = float(getattr(self, field))
            if not math.isfinite(chord) or chord <= 0:
                raise DegenerateChord(chord)
            object.__setattr__(self, field, chord)

    @property
    def taper_ratio(self) -> float:
        return self.tip_chord / self.root_chord


@dataclass(frozen=True)
class CrossSection:
    """An airfoil placed in 3D at a span station ``z``."""

    points: np.ndarray
    chord: float
    z: float
    sweep_offset: float = 0.0

    def __post_init__(self) -> None:
        pts = np.array(self.points, dtype=float).reshape(-1, 3)
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])


def place_section(
    profile: AirfoilProfile,
    chord: float,
    z: float,
    sweep_offset: float = 0.0,
) -> CrossSection:
    """Scale ``profile`` by ``chord``, shift it by ``sweep_offset`` along x and set it at span ``z``."""

    chord = float(chord)
    if not math.isfinite(chord) or chord <= 0:
        raise DegenerateChord(chord)
    pts = profile.points
    placed = np.column_stack(
        [
            pts[:, 0] * chord + sweep_offset,
            pts[:, 1] * chord,
            np.full(pts.shape[0], float(z)),
        ]
    )
    return CrossSection(points=placed, chord=chord, z=float(z), sweep_offset=float(sweep_offset))


def root_section(profile: AirfoilProfile, params: WingParameters) -> CrossSection:
    return place_section(profile, chord=params.root_chord, z=0.0, sweep_offset=0.0)


def tip_section(profile: AirfoilProfile, params: WingParameters) -> CrossSection:
    return place_section(
        profile,
        chord=params.tip_chord,
        z=params.semi_wingspan,
        sweep_offset=params.sweep,
    )


__all__ = ["WingParameters", "CrossSection", "place_section", "root_section", "tip_section"]
