"""Half-edge mesh model: vertices, edges, faces and caps."""

from .face_like import FaceLike
from .polyhedron import Vertex, Edge, Face, Polyhedron
from .cap import Cap
