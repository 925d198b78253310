"""
SOLID_CORE - Solid classification and geometry
==============================================

NO operations. NO animation. NO rendering.

Structure:
    spec/       - Constants and error taxonomy
    operators/  - Linear algebra helpers (numpy)
    polyhedra/  - Half-edge mesh model and caps
    specs/      - Capstone / Composite / Elementary classifications
    formes/     - Specs + geometry -> face/cap semantics
    builders/   - Unit-edge constructions and the geometry provider

Every geometry is a Polyhedron; every classification is a frozen Specs
value. Nothing in here mutates after construction.
"""

from . import spec
from . import operators
from . import polyhedra
from . import specs
from . import formes
from . import builders
