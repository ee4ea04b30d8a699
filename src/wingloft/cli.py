from __future__ import annotations

import logging
import pathlib

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from wingloft._config import UserSettings, get_user_settings
from wingloft.errors import WingError
from wingloft.mesh import analyze_mesh
from wingloft.pipeline import generate_wing_file
from wingloft.placement import WingParameters
from wingloft.profile import load_profile
from wingloft.triangulate import CAP_METHODS

console = Console()
app = typer.Typer(help="Loft Selig airfoils into tapered, swept wing STL files.")


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    log = logging.getLogger("wingloft")
    if not any(isinstance(handler, RichHandler) for handler in log.handlers):
        log.addHandler(RichHandler(console=console, show_path=False, markup=False))
    log.setLevel(logging.DEBUG)


def _log_active_units(settings: UserSettings) -> None:
    units = settings.units
    if abs(units.scale_to_mm - 1.0) < 1e-9:
        console.print(f"[magenta]Units: {units.name} ({units.label}).[/magenta]")
    else:
        console.print(
            f"[magenta]Units: {units.name} ({units.label}); 1 {units.label} = {units.scale_to_mm:.4g} mm.[/magenta]"
        )


def _next_available_path(path: pathlib.Path) -> pathlib.Path:
    """Return a non-conflicting path by appending ' (n)' before the suffix."""

    if not path.exists():
        return path

    parent = path.parent
    stem = path.stem
    suffix = path.suffix
    n = 1
    while True:
        candidate = parent / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def _report_failure(exc: WingError) -> None:
    console.print(Panel.fit(str(exc), title=f"{type(exc).__name__}", style="red"))


def _require_file(path: pathlib.Path) -> None:
    if not path.exists():
        raise typer.BadParameter(f"Airfoil path {path} does not exist.")
    if not path.is_file():
        raise typer.BadParameter(f"Airfoil path {path} is not a file.")


@app.command()
def build(
    airfoil: pathlib.Path = typer.Argument(..., help="Selig-formatted airfoil data."),
    semi_wingspan: float = typer.Option(..., "--semi-wingspan", "-w", help="Width of each wing."),
    sweep: float = typer.Option(0.0, "--sweep", "-s", help="Distance to sweep the wing tip back."),
    root_chord: float = typer.Option(..., "--root-chord", "-r", help="Root chord length."),
    tip_chord: float = typer.Option(..., "--tip-chord", "-t", help="Tip chord length."),
    outfile: pathlib.Path = typer.Option(..., "--outfile", "-o", help="Where to write the STL model."),
    ascii: bool | None = typer.Option(
        None, "--ascii/--binary", help="Write ASCII or binary STL (default from wingloft.cfg)."
    ),
    cap_method: str | None = typer.Option(
        None, "--cap-method", help="End cap triangulation: earcut, earclip or fan (default from wingloft.cfg)."
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing an existing STL."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline details."),
) -> None:
    """
    Loft the airfoil from root to tip and save the closed wing as an STL file.
    """

    _configure_logging(verbose)
    _require_file(airfoil)
    if cap_method is not None and cap_method not in CAP_METHODS:
        raise typer.BadParameter(f"--cap-method must be one of {', '.join(CAP_METHODS)}.")

    settings = get_user_settings()
    write_ascii = settings.ascii if ascii is None else ascii
    method = cap_method or settings.cap_method

    final_output = outfile
    if outfile.exists() and not overwrite:
        final_output = _next_available_path(outfile)
        console.print(f"[yellow]Output {outfile} exists; writing to {final_output} instead.[/yellow]")

    try:
        params = WingParameters(
            semi_wingspan=semi_wingspan,
            root_chord=root_chord,
            tip_chord=tip_chord,
            sweep=sweep,
        )
        mesh = generate_wing_file(airfoil, final_output, params, ascii=write_ascii, cap_method=method)
    except WingError as exc:
        _report_failure(exc)
        raise typer.Exit(code=1) from exc

    _log_active_units(settings)
    analysis = analyze_mesh(mesh)
    mode = "ASCII" if write_ascii else "binary"
    status = "watertight" if analysis.is_watertight else "; ".join(analysis.issues())
    console.print(
        Panel(
            f"Wrote {mode} STL to [green]{final_output}[/green].\n"
            f"{mesh.n_faces} triangles, {mesh.n_vertices} vertices, {status}.\n"
            f"Volume {mesh.signed_volume:.6g} {settings.units.label}^3, taper ratio {params.taper_ratio:.4g}.",
            title="Export complete",
            border_style="green",
        )
    )


@app.command()
def inspect(
    airfoil: pathlib.Path = typer.Argument(..., help="Selig-formatted airfoil data."),
) -> None:
    """
    Parse an airfoil file and summarise its outline.
    """

    _require_file(airfoil)
    try:
        profile = load_profile(airfoil)
    except WingError as exc:
        _report_failure(exc)
        raise typer.Exit(code=1) from exc

    xmin, xmax = profile.chord_extent
    direction = "counter-clockwise" if profile.is_counterclockwise else "clockwise"
    console.print(
        Panel(
            f"{profile.n_points} points, {direction} loop.\n"
            f"Chord extent {xmin:.4g} to {xmax:.4g}, thickness {profile.max_thickness:.4g}.\n"
            f"Enclosed area {abs(profile.signed_area):.4g}.",
            title=profile.name,
            border_style="cyan",
        )
    )
