from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from django.utils import timezone


@dataclass(frozen=True)
class PropertyBundle:
    """
    Derived properties of a stored string, computed once at creation
    """
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Mapping[str, int]

    def __post_init__(self):
        # read-only view so a record handed to a caller cannot drift from its value
        object.__setattr__(
            self, 'character_frequency_map', MappingProxyType(dict(self.character_frequency_map))
        )


@dataclass(frozen=True)
class StringRecord:
    """
    One analyzed string, keyed by the SHA-256 hash of its value
    """
    value: str
    properties: PropertyBundle
    created_at: datetime = field(default_factory=timezone.now)

    @property
    def id(self) -> str:
        return self.properties.sha256_hash
