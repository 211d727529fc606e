from __future__ import annotations

import logging
import time
from collections import defaultdict, deque
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from plates.catalog import DEFAULT_CATALOG
from plates.generator import VehicleRecordGenerator
from service.logging_config import configure_logging, correlation_id, get_correlation_id
from service.lookup import PlateLookupService
from service.rate_limit import RateLimiter
from service.settings import ServiceSettings
from service.source_client import BuscaPlacasClient, ExternalSourceClient

logger = logging.getLogger(__name__)


# ── Response Models ─────────────────────────────────────────────────

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaxStatusOut(CamelModel):
    status: str
    amount: int


class RegistrationRenewalOut(CamelModel):
    status: str
    due_date: str


class InsuranceStatusOut(CamelModel):
    status: str
    valid_until: str


class RatingCommentOut(CamelModel):
    polarity: str
    text: str
    date: str
    author: str


class RatingsOut(CamelModel):
    positive: int
    negative: int
    comments: list[RatingCommentOut]


class HistoryEventOut(CamelModel):
    date: str
    event: str
    location: str


class MarketValueOut(CamelModel):
    amount: int
    reference_month: str


class VehicleRecordResponse(CamelModel):
    plate: str
    brand: str
    model: str
    year: int
    color: str
    fuel_type: str
    chassis: str
    registration_id: str
    status: str
    municipality: str
    state: str
    owner_count: int
    liens: list[str]
    fine_points: int
    tax_status: TaxStatusOut
    registration_renewal: RegistrationRenewalOut
    insurance_status: InsuranceStatusOut
    ratings: RatingsOut
    event_history: list[HistoryEventOut]
    market_value: MarketValueOut


class HealthResponse(BaseModel):
    status: str


# ── App Factory ─────────────────────────────────────────────────────

def create_app(source: ExternalSourceClient | None = None) -> FastAPI:
    settings = ServiceSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    if source is None:
        source = BuscaPlacasClient(
            base_url=settings.source_base_url,
            partner_ref=settings.source_partner_ref,
            timeout_seconds=settings.source_timeout_seconds,
            user_agent=settings.source_user_agent,
        )
    service = PlateLookupService(source=source, generator=VehicleRecordGenerator(DEFAULT_CATALOG))
    limiter = RateLimiter(
        requests_per_minute=settings.rate_limit_rpm,
        trust_forwarded=settings.rate_limit_trust_forwarded,
    )

    latencies: deque[float] = deque(maxlen=settings.metrics_latency_samples)
    counters: dict[str, int] = defaultdict(int)

    app = FastAPI(title="Vehicle Plate Lookup API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next: Any) -> Response:
        return await limiter.middleware(request, call_next)

    # registered last so it wraps the limiter and 429s carry the id too
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Any) -> Response:
        correlation_id.set(request.headers.get("X-Correlation-ID", ""))
        cid = get_correlation_id()
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response

    # ── Lookup ──────────────────────────────────────────────────────

    @app.get("/consulta-veiculo", response_model=VehicleRecordResponse)
    async def consulta_veiculo(placa: str | None = None) -> VehicleRecordResponse:
        if not placa:
            counters["bad_request"] += 1
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Plate is required")

        t0 = time.monotonic()
        try:
            record = await service.lookup(placa)
        except Exception:
            counters["internal_error"] += 1
            logger.exception("Lookup failed unexpectedly for %r", placa)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
        latencies.append(time.monotonic() - t0)

        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plate not found")
        return VehicleRecordResponse.model_validate(asdict(record))

    # ── Health ──────────────────────────────────────────────────────

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    # ── Metrics ─────────────────────────────────────────────────────

    @app.get("/metrics")
    async def get_metrics() -> dict[str, Any]:
        ordered = sorted(latencies)
        n = len(ordered)
        return {
            "counters": {**counters, **service.outcomes},
            "lookup_latency": {
                "count": n,
                "p50_ms": round(ordered[n // 2] * 1000, 1) if n else 0,
                "p95_ms": round(ordered[min(int(n * 0.95), n - 1)] * 1000, 1) if n else 0,
                "p99_ms": round(ordered[min(int(n * 0.99), n - 1)] * 1000, 1) if n else 0,
            },
        }

    return app


app = create_app()
