"""Elementary formes: named irregular solids with no operation sites."""

from .base import PolyhedronForme


class ElementaryForme(PolyhedronForme):

    def modifications(self) -> list:
        return []

    def can_augment(self, face) -> bool:
        return False
