"""
Forme layer
===========

create_forme(specs, geom) picks the variant from the Specs predicates:

    Capstone    count 0 / 1 / 2   -> Prismatic / MonoCapstone / BiCapstone
    Composite   source family     -> AugmentedPrism / AugmentedClassical /
                                     DiminishedSolid / GyrateSolid
    Elementary                    -> ElementaryForme

Anything else raises UnclassifiableSpecsError.
"""

from ..spec.errors import UnclassifiableSpecsError
from .base import PolyhedronForme
from .capstone import CapstoneForme, PrismaticForme, MonoCapstoneForme, BiCapstoneForme
from .composite import (
    CompositeForme, AugmentedPrismForme, AugmentedClassicalForme,
    DiminishedSolidForme, GyrateSolidForme,
)
from .elementary import ElementaryForme


def create_forme(specs, geom) -> PolyhedronForme:
    if specs.is_capstone():
        variant = (PrismaticForme, MonoCapstoneForme, BiCapstoneForme)[specs.count]
        return variant(specs, geom)
    if specs.is_composite():
        if specs.is_augmented_prism():
            return AugmentedPrismForme(specs, geom)
        if specs.is_augmented_classical():
            return AugmentedClassicalForme(specs, geom)
        if specs.is_diminished_solid():
            return DiminishedSolidForme(specs, geom)
        if specs.is_gyrate_solid():
            return GyrateSolidForme(specs, geom)
        raise UnclassifiableSpecsError(f"No composite family for source {specs.source!r}")
    if specs.is_elementary():
        return ElementaryForme(specs, geom)
    raise UnclassifiableSpecsError(f"Cannot classify {specs!r}")


def from_specs(specs, provider=None) -> PolyhedronForme:
    """Forme over the canonical geometry of specs."""
    from ..builders import get_geometry
    geom = provider.get(specs) if provider is not None else get_geometry(specs)
    return create_forme(specs, geom)
