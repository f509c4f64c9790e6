"""SRDF Kinematics: semantic robot descriptions checked against their kinematic tree.

This library loads SRDF documents (planning groups, named poses, virtual
joints, end effectors, visual sensors and disabled collision pairs) and
validates every reference they make against a JAX-native kinematic model.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import core
from . import io
from .diagnostics import Diagnostic, Diagnostics, Severity

__version__ = "0.1.0"
__all__ = ["core", "io", "Diagnostic", "Diagnostics", "Severity"]
