"""
Built-in WiZ scene catalog
"""

from types import MappingProxyType
from typing import Mapping, Optional

# Scene name -> firmware scene id
SCENES: Mapping[str, int] = MappingProxyType({
    "Ocean": 1,
    "Romance": 2,
    "Sunset": 3,
    "Party": 4,
    "Fireplace": 5,
    "Cozy": 6,
    "Forest": 7,
    "Pastel Colors": 8,
    "Wake Up": 9,
    "Bedtime": 10,
    "Warm White": 11,
    "Daylight": 12,
    "Cool White": 13,
    "Night Light": 14,
    "Focus": 15,
    "Relax": 16,
    "True Colors": 17,
    "TV Time": 18,
    "Plant Growth": 19,
    "Spring": 20,
    "Summer": 21,
    "Fall": 22,
    "Deep Dive": 23,
    "Jungle": 24,
    "Mojito": 25,
    "Club": 26,
    "Christmas": 27,
    "Halloween": 28,
    "Candlelight": 29,
    "Golden White": 30,
    "Pulse": 31,
    "Steampunk": 32,
    "Rhythm": 1000,
})

_NAMES_BY_ID: Mapping[int, str] = MappingProxyType({v: k for k, v in SCENES.items()})


def resolve_scene(scene_id: Optional[int] = None, name: Optional[str] = None) -> Optional[int]:
    """
    Pick the scene id to send

    A name wins when it is in the catalog; otherwise the literal id is used.
    An unknown name never maps to some other catalog entry.

    Returns:
        Scene id, or None if neither argument resolves
    """
    if name is not None and name in SCENES:
        return SCENES[name]
    return scene_id


def scene_name(scene_id: Optional[int]) -> Optional[str]:
    """Reverse catalog lookup"""
    if scene_id is None:
        return None
    return _NAMES_BY_ID.get(scene_id)
