"""
Composite Specs
===============

Solids obtained by modifying a source solid: adding pyramids/cupolae
(augmented), removing caps (diminished) or rotating caps (gyrate).

SOURCES and families:
    prism                 triangular / pentagonal / hexagonal prism
    classical             tetrahedron, dodecahedron,
                          truncated tetrahedron / cube / dodecahedron
    icosahedron           diminished (+ augmented tridiminished)
    rhombicosidodecahedron gyrate and diminished

`align` ("para"/"meta") distinguishes the two non-equivalent ways of
placing a second modification. Sources outside the table are accepted
here but belong to no family (Forme creation rejects them).
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from ..spec.errors import InvalidSpecsError
from .base import PolyhedronSpecs
from .capstone import Capstone, PRIMARY, SECONDARY

ALIGNS = ("para", "meta")


@dataclass(frozen=True)
class Classical:
    """A Platonic solid or its truncation, by symmetry family (3, 4, 5)."""
    operation: str   # "regular" or "truncate"
    family: int      # 3 = tetrahedral, 4 = octahedral, 5 = icosahedral

    def is_regular(self) -> bool:
        return self.operation == "regular"

    def is_truncated(self) -> bool:
        return self.operation == "truncate"

    def is_tetrahedral(self) -> bool:
        return self.family == 3

    def is_octahedral(self) -> bool:
        return self.family == 4

    def is_icosahedral(self) -> bool:
        return self.family == 5


PRISM_SOURCES = {
    "triangular prism": Capstone(3, PRIMARY, 0, "prism"),
    "pentagonal prism": Capstone(5, PRIMARY, 0, "prism"),
    "hexagonal prism": Capstone(3, SECONDARY, 0, "prism"),
}

CLASSICAL_SOURCES = {
    "tetrahedron": Classical("regular", 3),
    "dodecahedron": Classical("regular", 5),
    "truncated tetrahedron": Classical("truncate", 3),
    "truncated cube": Classical("truncate", 4),
    "truncated dodecahedron": Classical("truncate", 5),
}

DIMINISHED_SOURCES = ("icosahedron",)
GYRATE_SOURCES = ("rhombicosidodecahedron",)

# source -> (max augmentations, counts that need an alignment tag)
AUGMENT_LIMITS = {
    "triangular prism": (3, ()),
    "pentagonal prism": (2, ()),
    "hexagonal prism": (3, (2,)),
    "tetrahedron": (1, ()),
    "dodecahedron": (3, (2,)),
    "truncated tetrahedron": (1, ()),
    "truncated cube": (2, ()),
    "truncated dodecahedron": (3, (2,)),
}

COUNT_PREFIX = {1: "", 2: "bi", 3: "tri"}


@dataclass(frozen=True)
class Composite(PolyhedronSpecs):
    source: str
    augmented: int = 0
    diminished: int = 0
    gyrate: int = 0
    align: Optional[str] = None

    family = "composite"

    def __post_init__(self):
        for field in ("augmented", "diminished", "gyrate"):
            value = getattr(self, field)
            if not isinstance(value, int) or not 0 <= value <= 3:
                raise InvalidSpecsError(f"Composite {field} must be 0..3, got {value!r}")
        if self.align not in (None,) + ALIGNS:
            raise InvalidSpecsError(f"Unknown align {self.align!r}")

    # -------------------------------------------------------------------------
    # Family predicates
    # -------------------------------------------------------------------------

    def source_family(self) -> Optional[str]:
        if self.source in PRISM_SOURCES:
            return "prism"
        if self.source in CLASSICAL_SOURCES:
            return "classical"
        if self.source in DIMINISHED_SOURCES:
            return "icosahedron"
        if self.source in GYRATE_SOURCES:
            return "rhombicosidodecahedron"
        return None

    def is_augmented_prism(self) -> bool:
        return self.source_family() == "prism"

    def is_augmented_classical(self) -> bool:
        return self.source_family() == "classical"

    def is_diminished_solid(self) -> bool:
        return self.source_family() == "icosahedron"

    def is_gyrate_solid(self) -> bool:
        return self.source_family() == "rhombicosidodecahedron"

    def source_prism(self) -> Capstone:
        if self.source not in PRISM_SOURCES:
            raise ValueError(f"{self.source} is not a prism source")
        return PRISM_SOURCES[self.source]

    def source_classical(self) -> Classical:
        if self.source not in CLASSICAL_SOURCES:
            raise ValueError(f"{self.source} is not a classical source")
        return CLASSICAL_SOURCES[self.source]

    def is_augmented(self) -> bool:
        return self.augmented > 0

    def is_diminished(self) -> bool:
        return self.diminished > 0

    def is_gyrate(self) -> bool:
        return self.gyrate > 0

    def total_count(self) -> int:
        return self.augmented + self.diminished + self.gyrate

    def is_mono(self) -> bool:
        return self.total_count() == 1

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    def _gyrate_name(self) -> str:
        g, d = self.gyrate, self.diminished
        align = self.align or ""
        if g and d:
            if g + d == 2:
                return f"{align}gyrate diminished rhombicosidodecahedron"
            if g == 2:
                return "bigyrate diminished rhombicosidodecahedron"
            return "gyrate bidiminished rhombicosidodecahedron"
        if g:
            word = f"{COUNT_PREFIX[g]}gyrate"
        else:
            word = f"{COUNT_PREFIX[d]}diminished"
        if g + d == 2:
            word = align + word
        return f"{word} rhombicosidodecahedron"

    def _diminished_name(self) -> str:
        if self.augmented:
            return "augmented tridiminished icosahedron"
        if self.diminished == 1:
            return "gyroelongated pentagonal pyramid"
        if self.diminished == 2 and self.align == "para":
            return "pentagonal antiprism"
        align = self.align or ""
        if self.diminished == 2:
            return f"{align}bidiminished icosahedron"
        return "tridiminished icosahedron"

    def name(self) -> str:
        if self.total_count() == 0:
            return self.source
        if self.is_gyrate_solid():
            return self._gyrate_name()
        if self.is_diminished_solid():
            return self._diminished_name()
        if self.source == "tetrahedron" and self.augmented == 1:
            return "triangular bipyramid"
        align = (self.align or "") if self.augmented == 2 else ""
        return f"{align}{COUNT_PREFIX[self.augmented]}augmented {self.source}"

    def __repr__(self):
        return f"Composite({self.name()})"

    @staticmethod
    def query() -> Tuple["Composite", ...]:
        return _composite_universe()


@lru_cache(maxsize=None)
def _composite_universe() -> Tuple[Composite, ...]:
    items = []
    for source, (limit, aligned) in AUGMENT_LIMITS.items():
        items.append(Composite(source))
        for count in range(1, limit + 1):
            if count in aligned:
                items.extend(Composite(source, augmented=count, align=a) for a in ALIGNS)
            else:
                items.append(Composite(source, augmented=count))

    items.append(Composite("icosahedron"))
    items.append(Composite("icosahedron", diminished=1))
    items.extend(Composite("icosahedron", diminished=2, align=a) for a in ALIGNS)
    items.append(Composite("icosahedron", diminished=3))
    items.append(Composite("icosahedron", augmented=1, diminished=3))

    for total in range(4):
        for d in range(total + 1):
            g = total - d
            if total == 2:
                items.extend(Composite("rhombicosidodecahedron", gyrate=g, diminished=d, align=a)
                             for a in ALIGNS)
            else:
                items.append(Composite("rhombicosidodecahedron", gyrate=g, diminished=d))
    return tuple(items)
