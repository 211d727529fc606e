from __future__ import annotations

import re
from typing import Any, Mapping

from plates.catalog import DEFAULT_CATALOG, VehicleCatalog
from plates.data_models import (
    HistoryEvent,
    InsuranceStatus,
    MarketValue,
    RatingComment,
    Ratings,
    RegistrationRenewal,
    TaxStatus,
    VehicleRecord,
)
from plates.fillers import Filler, SeededFiller, plate_seed
from plates.plate_format import format_plate


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class VehicleRecordGenerator:
    """Builds complete vehicle records from a catalog and a filler.

    ``generate`` is the deterministic fallback: the same plate always yields the
    same record. ``complete_scrape`` wraps scraped fields and fills everything
    the scrape never covers from whatever filler it is given.
    """

    def __init__(self, catalog: VehicleCatalog = DEFAULT_CATALOG) -> None:
        self.catalog = catalog

    def generate(self, seed_plate: str) -> VehicleRecord:
        filler = SeededFiller(plate_seed(seed_plate))
        identity = self._identity(filler)
        return VehicleRecord(plate=format_plate(seed_plate), **identity, **self._ownership(filler))

    def complete_scrape(self, plate: str, fields: Mapping[str, str], filler: Filler) -> VehicleRecord:
        defaults = self.catalog.defaults
        identity: dict[str, Any] = {
            "brand": fields.get("brand", defaults.brand),
            "model": fields.get("model", defaults.model),
            "year": _parse_year(fields.get("year"), defaults.year),
            "color": fields.get("color", defaults.color),
            "fuel_type": fields.get("fuel_type", defaults.fuel_type),
            "chassis": fields.get("chassis") or self.draw_chassis(filler),
            "registration_id": fields.get("registration_id") or self.draw_registration_id(filler),
            "status": fields.get("status", defaults.status),
            "municipality": fields.get("municipality", defaults.municipality),
            "state": fields.get("state", defaults.state),
        }
        return VehicleRecord(plate=format_plate(plate), **identity, **self._ownership(filler))

    def draw_chassis(self, filler: Filler) -> str:
        alphabet = self.catalog.chassis_alphabet
        body = "".join(
            alphabet[filler.randint(0, len(alphabet) - 1)]
            for _ in range(self.catalog.chassis_body_length)
        )
        return self.catalog.chassis_prefix + body

    def draw_registration_id(self, filler: Filler) -> str:
        return str(100_000_000 + filler.randint(0, 899_999_999))

    def _identity(self, filler: Filler) -> dict[str, Any]:
        cat = self.catalog
        brand = cat.brands[filler.randint(0, len(cat.brands) - 1)]
        models = cat.models_for(brand)
        model = models[filler.randint(0, len(models) - 1)]
        year = cat.year_base + filler.randint(0, cat.year_span)
        color = cat.colors[filler.randint(0, len(cat.colors) - 1)]
        fuel_type = cat.fuel_types[filler.randint(0, len(cat.fuel_types) - 1)]
        chassis = self.draw_chassis(filler)
        registration_id = self.draw_registration_id(filler)
        status = "DEREGISTERED" if filler.randint(0, 9) == 0 else "IN_CIRCULATION"
        municipality, state = cat.locations[filler.randint(0, len(cat.locations) - 1)]
        return {
            "brand": brand,
            "model": model,
            "year": year,
            "color": color,
            "fuel_type": fuel_type,
            "chassis": chassis,
            "registration_id": registration_id,
            "status": status,
            "municipality": municipality,
            "state": state,
        }

    def _ownership(self, filler: Filler) -> dict[str, Any]:
        cat = self.catalog
        owner_count = filler.randint(1, 4)
        liens = (cat.lien_label,) if filler.randint(0, 9) >= 8 else ()
        fine_points = filler.randint(0, 4)
        tax_state = "PAID" if filler.randint(0, 4) > 0 else "PENDING"
        tax_amount = 800 + filler.randint(0, 2000)
        renewal_state = "CURRENT" if filler.randint(0, 2) > 0 else "EXPIRED"
        insurance_state = "ACTIVE" if filler.randint(0, 4) > 1 else "INACTIVE"
        positive = filler.randint(5, 19)
        negative = filler.randint(0, 4)
        market_amount = 15_000 + filler.randint(0, 50_000)

        comments = tuple(RatingComment(c.polarity, c.text, c.date, c.author) for c in cat.comments)
        history = [HistoryEvent(date, event, location) for date, event, location in cat.events]
        fine_date, fine_location = cat.fine_event
        history.append(
            HistoryEvent(
                fine_date,
                cat.fine_event_label if fine_points > 0 else cat.clean_event_label,
                fine_location,
            )
        )

        return {
            "owner_count": owner_count,
            "liens": liens,
            "fine_points": fine_points,
            "tax_status": TaxStatus(status=tax_state, amount=tax_amount),
            "registration_renewal": RegistrationRenewal(status=renewal_state, due_date=cat.renewal_due_date),
            "insurance_status": InsuranceStatus(status=insurance_state, valid_until=cat.insurance_valid_until),
            "ratings": Ratings(positive=positive, negative=negative, comments=comments),
            "event_history": tuple(history),
            "market_value": MarketValue(amount=market_amount, reference_month=cat.market_reference_month),
        }


def _parse_year(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    return int(match.group(1)) or default
