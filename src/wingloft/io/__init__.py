"""Mesh file formats."""

from __future__ import annotations

from .stl import encode_stl, write_stl

__all__ = ["encode_stl", "write_stl"]
