from __future__ import annotations

import logging
from collections import defaultdict

from plates.data_models import VehicleRecord
from plates.extraction import extract_fields, is_sufficient
from plates.fillers import Filler, RandomFiller
from plates.generator import VehicleRecordGenerator
from plates.plate_format import normalize_plate, plate_kind
from service.source_client import ExternalSourceClient

logger = logging.getLogger(__name__)


class PlateLookupService:
    """Live scrape first, deterministic record when the scrape falls short.

    Returns ``None`` only for plates that match neither grammar. Upstream and
    parsing faults are absorbed into the fallback path; anything raised by the
    generator itself propagates, as does task cancellation.
    """

    def __init__(
        self,
        source: ExternalSourceClient,
        generator: VehicleRecordGenerator,
        gap_filler: Filler | None = None,
    ) -> None:
        self.source = source
        self.generator = generator
        self.gap_filler = gap_filler or RandomFiller()
        self.outcomes: dict[str, int] = defaultdict(int)

    async def lookup(self, raw_plate: str) -> VehicleRecord | None:
        plate = normalize_plate(raw_plate)
        kind = plate_kind(plate)
        if kind is None:
            self.outcomes["not_found"] += 1
            logger.info("Rejected plate with unknown format: %r", raw_plate)
            return None

        try:
            markup = await self.source.fetch_raw_markup(plate)
            fields = extract_fields(markup)
            if is_sufficient(fields):
                record = self.generator.complete_scrape(plate, fields, self.gap_filler)
                self.outcomes["live"] += 1
                logger.info(
                    "Live lookup for %s extracted %d fields", plate, len(fields),
                    extra={"extra_data": {"plate": plate, "kind": kind, "fields": sorted(fields)}},
                )
                return record
            self.outcomes["fallback_insufficient"] += 1
            logger.info(
                "Only %d fields extracted for %s, using generated record", len(fields), plate,
                extra={"extra_data": {"plate": plate, "kind": kind, "fields": sorted(fields)}},
            )
        except Exception as exc:
            self.outcomes["fallback_error"] += 1
            logger.warning("Source lookup failed for %s: %s", plate, exc)

        return self.generator.generate(plate)
