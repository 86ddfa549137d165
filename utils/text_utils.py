"""
Text utilities for labels coming from handheld entry.

Used for zone grouping, supplier grouping and stable name ordering.
"""

import unicodedata
from typing import Optional


def clean_label(value: Optional[str]) -> str:
    """
    Trim a free-text label.

    Returns:
        Stripped string, or "" for None/whitespace-only input
    """
    if not value:
        return ""
    return value.strip()


def normalize_zone_key(label: Optional[str]) -> Optional[str]:
    """
    Normalize a location label for zone grouping.

    Handles accents, case and stray whitespace:
    - "Aisle 3 " → "aisle 3"
    - "Bodega Pequeña" → "bodega pequena"
    - "COOLER" → "cooler"

    Args:
        label: Location label as entered (may have accents, mixed case)

    Returns:
        Case-folded ASCII-ish key, or None if input is empty
    """
    label = clean_label(label)

    if not label:
        return None

    # NFD splits base chars from accents so the marks can be dropped
    normalized = unicodedata.normalize('NFD', label)
    stripped = ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )

    return ' '.join(stripped.casefold().split())


def name_sort_key(name: Optional[str]) -> tuple[str, str]:
    """Case-insensitive ordering with the raw name as tie-break."""
    name = name or ""
    return (name.casefold(), name)
