"""wingloft – loft Selig airfoils into tapered, swept wing meshes."""

from __future__ import annotations

from .errors import (
    DegenerateChord,
    DegenerateMesh,
    EmptyProfile,
    InvalidParameters,
    ParseError,
    ReadError,
    WingError,
    WriteError,
)
from .io.stl import encode_stl, write_stl
from .loft import build_wing, loft_sections
from .mesh import Mesh, MeshAnalysis, analyze_mesh
from .pipeline import generate_wing, generate_wing_file
from .placement import CrossSection, WingParameters, place_section, root_section, tip_section
from .profile import AirfoilProfile, load_profile, parse_profile
from .triangulate import triangulate_polygon

__all__ = [
    "__version__",
    "AirfoilProfile",
    "CrossSection",
    "DegenerateChord",
    "DegenerateMesh",
    "EmptyProfile",
    "InvalidParameters",
    "Mesh",
    "MeshAnalysis",
    "ParseError",
    "ReadError",
    "WingError",
    "WingParameters",
    "WriteError",
    "analyze_mesh",
    "build_wing",
    "encode_stl",
    "generate_wing",
    "generate_wing_file",
    "load_profile",
    "loft_sections",
    "parse_profile",
    "place_section",
    "root_section",
    "tip_section",
    "triangulate_polygon",
    "write_stl",
]

__version__ = "0.1.0"
