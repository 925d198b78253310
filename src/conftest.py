"""
Shared Test Fixtures
====================

Loaded by pytest for everything under src/tests. Puts src/ on sys.path
so solid_core and solid_ops import without installation, and builds the
classical solids several test modules share.

Usage:
    cd polyforme/src
    pytest tests/ -v
"""

import sys
from pathlib import Path

import pytest

src_root = Path(__file__).parent
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from solid_core.builders import build_classical


@pytest.fixture(scope="session")
def cube():
    """Unit-edge cube centred at the origin."""
    return build_classical("cube")


@pytest.fixture(scope="session")
def icosahedron():
    """Icosahedron as a bare mesh; its twelve vertices are pentagonal pyramid caps."""
    return build_classical("icosahedron")
