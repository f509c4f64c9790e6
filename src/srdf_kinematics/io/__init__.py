"""I/O utilities for loading robot descriptions from XML files.

This module provides functions for parsing URDF kinematic trees and the SRDF
semantic descriptions validated against them.
"""

from .urdf_parser import load_urdf, load_urdf_string
from .srdf_parser import (
    load_srdf,
    load_srdf_document,
    load_srdf_element,
    load_srdf_file,
    load_srdf_string,
)

__all__ = [
    "load_urdf",
    "load_urdf_string",
    "load_srdf",
    "load_srdf_element",
    "load_srdf_document",
    "load_srdf_string",
    "load_srdf_file",
]
