import hashlib
from collections import Counter

from .models import PropertyBundle


def compute_sha256(value: str) -> str:
    """Compute SHA-256 hash for the string."""
    # surrogatepass: lone surrogates have no UTF-8 form but are still valid str
    return hashlib.sha256(value.encode('utf-8', 'surrogatepass')).hexdigest()


def is_palindrome(value: str) -> bool:
    """Check if string reads the same forward and backward (case-insensitive).

    Whitespace and punctuation are kept, so "Level One" is not a palindrome.
    """
    folded = value.casefold()
    return folded == folded[::-1]


def count_words(value: str) -> int:
    return len(value.split())


def analyze_string(value: str) -> PropertyBundle:
    """Compute all derived properties of a string."""
    char_freq = Counter(value)

    return PropertyBundle(
        length=len(value),
        is_palindrome=is_palindrome(value),
        unique_characters=len(char_freq),
        word_count=count_words(value),
        sha256_hash=compute_sha256(value),
        character_frequency_map=dict(char_freq),
    )
