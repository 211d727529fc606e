from __future__ import annotations

import re
from typing import Literal


PlateKind = Literal["legacy", "mercosul"]

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_LEGACY = re.compile(r"^[A-Z]{3}[0-9]{4}$")
_MERCOSUL = re.compile(r"^[A-Z]{3}[0-9][A-Z][0-9]{2}$")


def normalize_plate(raw: str) -> str:
    return _NON_ALNUM.sub("", raw.upper())


def plate_kind(normalized: str) -> PlateKind | None:
    if _LEGACY.match(normalized):
        return "legacy"
    if _MERCOSUL.match(normalized):
        return "mercosul"
    return None


def is_valid_plate(normalized: str) -> bool:
    return plate_kind(normalized) is not None


def format_plate(normalized: str) -> str:
    """Render a normalized plate as ``XXX-XXXX``."""
    return f"{normalized[:3]}-{normalized[3:]}"


def strip_plate(formatted: str) -> str:
    return formatted.replace("-", "")
