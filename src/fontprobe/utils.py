"""Shared helpers for parsing font tool output."""

from __future__ import annotations

from collections.abc import Iterable
import re


XLFD_FIELD_COUNT = 14
"""Number of fields in an X Logical Font Description (foundry .. encoding)."""

XLFD_FAMILY_FIELD = 1

# Leftmost of: "(TrueType)" suffix, "12,14" point sizes, "REG_SZ" type marker.
# A lone number ("Bauhaus 93") belongs to the name; sizes always carry a comma.
_REGISTRY_ANNOTATION = re.compile(
    r"\s*(?:"
    r"\("
    r"|(?<!\S)\d+(?:,\d+)*(?=,)"
    r"|\bREG_[A-Z_]+\b"
    r")"
)


def normalize_family(name: str) -> str:
    """Return a normalised font family key suitable for lookups."""
    return name.strip().lower()


def split_output_lines(output: str) -> list[str]:
    """Split tool output into lines, dropping blank ones."""
    return [line for line in output.splitlines() if line.strip()]


def parse_registry_line(line: str) -> str | None:
    """
    Extract the family name from one ``reg query`` value line.

    ``"  Arial (TrueType)    REG_SZ    arial.ttf"`` yields ``"Arial"``. The
    leftmost trailing annotation marks the end of the name.
    """
    text = line.strip()
    if not text:
        return None
    match = _REGISTRY_ANNOTATION.search(text)
    family = text[: match.start()] if match else text
    family = family.strip()
    return family or None


def parse_registry_output(output: str) -> list[str]:
    """Parse a full ``reg query`` listing, skipping the key header line."""
    lines = split_output_lines(output)
    families: list[str] = []
    for line in lines[1:]:
        family = parse_registry_line(line)
        if family is not None:
            families.append(family)
    return families


def parse_xlfd_line(line: str, field_count: int = XLFD_FIELD_COUNT) -> str | None:
    """
    Return the family field of an XLFD font name.

    ``-misc-fixed-medium-r-normal--13-120-75-75-c-70-iso8859-1`` yields
    ``"fixed"``. Names without exactly ``field_count`` fields (aliases such as
    ``cursor``) yield ``None``.
    """
    parts = line.strip().split("-")
    if parts[0] or len(parts) != field_count + 1:
        return None
    family = parts[1 + XLFD_FAMILY_FIELD].strip()
    if not family or family == "*":
        return None
    return family


def unique_sorted(values: Iterable[str]) -> list[str]:
    """Return the distinct values in sorted order."""
    return sorted(set(values))


__all__ = [
    "XLFD_FIELD_COUNT",
    "normalize_family",
    "parse_registry_line",
    "parse_registry_output",
    "parse_xlfd_line",
    "split_output_lines",
    "unique_sorted",
]
