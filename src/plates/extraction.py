from __future__ import annotations

import re


MIN_EXTRACTED_FIELDS = 3

_WHITESPACE = re.compile(r"\s+")

# label prefixes as printed by the source page, matched case-insensitively
_FIELD_LABELS: dict[str, str] = {
    "brand": "Marca",
    "model": "Modelo",
    "year": "Ano",
    "color": "Cor",
    "fuel_type": "Combust",
    "chassis": "Chassi",
    "registration_id": "Renavam",
    "status": "Situa",
    "municipality": "Munic",
    "state": "UF",
}

FIELD_PATTERNS: dict[str, re.Pattern[str]] = {
    name: re.compile(
        rf"<td[^>]*>{label}[^<]*</td>\s*<td[^>]*>([^<]+)</td>",
        re.IGNORECASE,
    )
    for name, label in _FIELD_LABELS.items()
}


def extract_fields(markup: str) -> dict[str, str]:
    """Pull label/value table cells out of a result page.

    Returns only the fields whose value cell held non-blank text, trimmed.
    """
    flat = _WHITESPACE.sub(" ", markup)
    found: dict[str, str] = {}
    for name, pattern in FIELD_PATTERNS.items():
        match = pattern.search(flat)
        if match and match.group(1).strip():
            found[name] = match.group(1).strip()
    return found


def is_sufficient(fields: dict[str, str]) -> bool:
    return len(fields) >= MIN_EXTRACTED_FIELDS
