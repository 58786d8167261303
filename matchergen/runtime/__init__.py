"""
Runtime support imported by generated matcher modules.
"""

from matchergen.runtime.bean_property_matcher import (
    BeanPropertyMatcher,
    UnreadablePropertyError,
    read_property,
)
from matchergen.runtime.markers import (
    GENERATOR_NAME,
    GeneratedMarker,
    generated,
    generated_marker,
    is_generated,
)

__all__ = [
    "GENERATOR_NAME",
    "BeanPropertyMatcher",
    "GeneratedMarker",
    "UnreadablePropertyError",
    "generated",
    "generated_marker",
    "is_generated",
    "read_property",
]
