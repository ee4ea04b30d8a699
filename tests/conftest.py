from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

TRIANGLE_AIRFOIL = "TRIANGLE\n0.0 0.0\n1.0 0.1\n1.0 -0.1\n"


def naca4_selig(code: str = "2412", count: int = 40, name: str | None = None) -> str:
    """Selig text for a NACA 4-digit section with a closed trailing edge and cosine spacing."""
    m = int(code[0]) / 100.0
    p = int(code[1]) / 10.0
    t = int(code[2:]) / 100.0
    beta = np.linspace(0.0, np.pi, count)
    x = 0.5 * (1.0 - np.cos(beta))
    yt = 5.0 * t * (0.2969 * np.sqrt(x) - 0.1260 * x - 0.3516 * x**2 + 0.2843 * x**3 - 0.1036 * x**4)
    if m > 0 and p > 0:
        fore = x < p
        yc = np.where(fore, m / p**2 * (2 * p * x - x**2), m / (1 - p) ** 2 * ((1 - 2 * p) + 2 * p * x - x**2))
        dyc = np.where(fore, 2 * m / p**2 * (p - x), 2 * m / (1 - p) ** 2 * (p - x))
    else:
        yc = np.zeros_like(x)
        dyc = np.zeros_like(x)
    theta = np.arctan(dyc)
    xu, yu = x - yt * np.sin(theta), yc + yt * np.cos(theta)
    xl, yl = x + yt * np.sin(theta), yc - yt * np.cos(theta)

    lines = [name or f"NACA {code}"]
    lines.extend(f"{a:.6f} {b:.6f}" for a, b in zip(xu[::-1], yu[::-1]))
    lines.extend(f"{a:.6f} {b:.6f}" for a, b in zip(xl[1:], yl[1:]))
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "wingloft-home"
    monkeypatch.setenv("WINGLOFT_HOME", str(home))
    return home


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def data_dir(project_root: Path) -> Path:
    return project_root / "tests" / "data"


@pytest.fixture
def naca2412_text() -> str:
    return naca4_selig("2412", count=40)


@pytest.fixture
def naca2412_file(tmp_path: Path, naca2412_text: str) -> Path:
    path = tmp_path / "naca2412.dat"
    path.write_text(naca2412_text)
    return path
