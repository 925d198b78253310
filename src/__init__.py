"""
polyforme Source Code
=====================

Classification of convex regular-faced solids (capstones, composites,
elementary Johnson solids) and the invertible operations between them.

Modules:
    solid_core - Specs classification, half-edge mesh, caps, geometry catalog
    solid_ops  - Pose alignment, OpPair engine, the seven operations
    scripts    - Operation survey over the classified universe
    tests      - pytest suites for solid_core and solid_ops

Requirements:
    Python >= 3.9
    numpy >= 1.20  (vertex arrays, frames, rotations)
    scipy >= 1.11  (ConvexHull face lists, cKDTree vertex matching)
"""

import sys
from importlib.metadata import PackageNotFoundError, version

if sys.version_info < (3, 9):
    raise ImportError(f"polyforme requires Python >= 3.9, got {sys.version}")

import numpy as np
import scipy


def _release(text):
    return tuple(int(p) for p in text.split('.')[:2] if p.isdigit())


for _name, _module, _minimum in (("scipy", scipy, (1, 11)), ("numpy", np, (1, 20))):
    if _release(_module.__version__) < _minimum:
        raise ImportError(
            f"polyforme requires {_name} >= {'.'.join(map(str, _minimum))}, "
            f"got {_module.__version__}")

try:
    __version__ = version("polyforme")
except PackageNotFoundError:
    __version__ = "unknown"
