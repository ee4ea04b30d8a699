"""Selig-format airfoil parsing.

A Selig file lists chord-normalized ``x y`` pairs starting at the trailing
edge, running over the upper surface to the leading edge and back along the
lower surface. The first line is usually the airfoil name.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .errors import EmptyProfile, ParseError, ReadError
from .triangulate import signed_area

logger = logging.getLogger(__name__)

MIN_POINTS = 3


@dataclass(frozen=True)
class AirfoilProfile:
    """Closed airfoil boundary; the last point is adjacent to the first."""

    name: str
    points: np.ndarray

    def __post_init__(self) -> None:
        pts = np.array(self.points, dtype=float).reshape(-1, 2)
        if pts.shape[0] < MIN_POINTS:
            raise EmptyProfile(pts.shape[0])
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    @property
    def signed_area(self) -> float:
        return signed_area(self.points)

    @property
    def is_counterclockwise(self) -> bool:
        return self.signed_area > 0

    @property
    def chord_extent(self) -> tuple[float, float]:
        return float(self.points[:, 0].min()), float(self.points[:, 0].max())

    @property
    def max_thickness(self) -> float:
        return float(self.points[:, 1].max() - self.points[:, 1].min())


def _parse_float(token: str) -> float | None:
    try:
        value = float(token)
    except ValueError:
        return None
    return value


def _is_header(tokens: list[str]) -> bool:
    return len(tokens) != 2 or any(_parse_float(token) is None for token in tokens)


def _parse_pair(line_number: int, line: str, tokens: list[str]) -> tuple[float, float]:
    if len(tokens) != 2:
        raise ParseError(line_number, line, f"expected 2 values, found {len(tokens)}")
    values = []
    for token in tokens:
        value = _parse_float(token)
        if value is None:
            raise ParseError(line_number, line, f"{token!r} is not a number")
        if not math.isfinite(value):
            raise ParseError(line_number, line, f"{token!r} is not finite")
        values.append(value)
    return values[0], values[1]


def _drop_duplicates(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    kept: list[tuple[float, float]] = []
    for point in points:
        if kept and point == kept[-1]:
            continue
        kept.append(point)
    # Selig files often repeat the trailing edge point to close the loop.
    while len(kept) > 1 and kept[-1] == kept[0]:
        kept.pop()
    dropped = len(points) - len(kept)
    if dropped:
        logger.debug("Dropped %d duplicate airfoil point(s).", dropped)
    return kept


def parse_profile(text: str, name: str | None = None, default_name: str = "airfoil") -> AirfoilProfile:
    """Parse Selig airfoil text into an :class:`AirfoilProfile`.

    Only the first non-blank line may be a header, and it is one whenever it
    is not exactly two numbers. Its text is used as the profile name unless
    ``name`` is given, and ``default_name`` applies when neither is present. Lines starting with ``#`` are comments.
    Reported line numbers are 1-based positions in ``text``.
    """

    header: str | None = None
    seen_content = False
    points: list[tuple[float, float]] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        tokens = stripped.split()
        if not seen_content:
            seen_content = True
            if _is_header(tokens):
                header = stripped
                continue
        points.append(_parse_pair(line_number, line, tokens))

    points = _drop_duplicates(points)
    if len(points) < MIN_POINTS:
        raise EmptyProfile(len(points))

    profile = AirfoilProfile(name=name or header or default_name, points=np.asarray(points, dtype=float))
    logger.debug(
        "Parsed airfoil %r with %d points (%s).",
        profile.name,
        profile.n_points,
        "counter-clockwise" if profile.is_counterclockwise else "clockwise",
    )
    return profile


def load_profile(path: Path | str) -> AirfoilProfile:
    """Read and parse a Selig airfoil file; the file stem names headerless profiles."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        line_number = exc.object.count(b"\n", 0, exc.start) + 1
        reason = f"line {line_number} is not valid UTF-8 (byte {exc.object[exc.start]:#04x})"
        raise ReadError(path, reason) from exc
    except OSError as exc:
        raise ReadError(path, exc.strerror or str(exc)) from exc
    return parse_profile(text, default_name=path.stem)


__all__ = ["AirfoilProfile", "parse_profile", "load_profile", "MIN_POINTS"]
