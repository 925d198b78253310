"""Constants and error taxonomy."""

from .constants import *  # noqa: F401,F403
from .errors import (
    SolidError,
    MalformedMeshError,
    DimensionMismatchError,
    InvalidSpecsError,
    UnclassifiableSpecsError,
    UnknownSolidError,
    NoMatchingTransitionError,
    NoApplicableOperationError,
)
