from __future__ import annotations

from pathlib import Path
from typing import Sequence


class WingError(ValueError):
    """Base class for every failure raised while building a wing mesh."""

    kind = "wing_error"


class ParseError(WingError):
    """Raised when a line of airfoil data cannot be read as an ``x y`` pair."""

    kind = "parse_error"

    def __init__(self, line_number: int, line: str, reason: str = "expected two numbers") -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}, got {line.strip()!r}")


class ReadError(WingError):
    """Raised when an airfoil file cannot be read as UTF-8 text; the cause is chained."""

    kind = "read_error"

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to read {self.path}: {reason}")


class EmptyProfile(WingError):
    kind = "empty_profile"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Airfoil profile needs at least 3 points, got {count}.")


class DegenerateChord(WingError):
    kind = "degenerate_chord"

    def __init__(self, chord: float) -> None:
        self.chord = chord
        super().__init__(f"Chord length must be positive and finite, got {chord!r}.")


class DegenerateMesh(WingError):
    """Raised when the loft cannot produce a closed mesh with non-zero area faces."""

    kind = "degenerate_mesh"

    def __init__(self, message: str, faces: Sequence[int] = ()) -> None:
        self.faces = tuple(int(f) for f in faces)
        super().__init__(message)


class InvalidParameters(WingError):
    kind = "invalid_parameters"

    def __init__(self, field: str, value: float, requirement: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} must be {requirement}, got {value!r}.")


class WriteError(WingError):
    """Raised when the STL bytes cannot be written; the OSError is chained as ``__cause__``."""

    kind = "write_error"

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to write {self.path}: {reason}")


__all__ = [
    "WingError",
    "ParseError",
    "ReadError",
    "EmptyProfile",
    "DegenerateChord",
    "DegenerateMesh",
    "InvalidParameters",
    "WriteError",
]
