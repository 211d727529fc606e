from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


VehicleStatus = Literal["IN_CIRCULATION", "DEREGISTERED"]
TaxState = Literal["PAID", "PENDING"]
RenewalState = Literal["CURRENT", "EXPIRED"]
InsuranceState = Literal["ACTIVE", "INACTIVE"]


@dataclass(frozen=True)
class TaxStatus:
    status: TaxState
    amount: int


@dataclass(frozen=True)
class RegistrationRenewal:
    status: RenewalState
    due_date: str


@dataclass(frozen=True)
class InsuranceStatus:
    status: InsuranceState
    valid_until: str


@dataclass(frozen=True)
class RatingComment:
    polarity: str
    text: str
    date: str
    author: str


@dataclass(frozen=True)
class Ratings:
    positive: int
    negative: int
    comments: tuple[RatingComment, ...]


@dataclass(frozen=True)
class HistoryEvent:
    date: str
    event: str
    location: str


@dataclass(frozen=True)
class MarketValue:
    amount: int
    reference_month: str


@dataclass(frozen=True)
class VehicleRecord:
    plate: str
    brand: str
    model: str
    year: int
    color: str
    fuel_type: str
    chassis: str
    registration_id: str
    # scraped records carry the source's own wording
    status: str
    municipality: str
    state: str
    owner_count: int
    liens: tuple[str, ...]
    fine_points: int
    tax_status: TaxStatus
    registration_renewal: RegistrationRenewal
    insurance_status: InsuranceStatus
    ratings: Ratings
    event_history: tuple[HistoryEvent, ...]
    market_value: MarketValue
