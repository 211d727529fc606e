from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CannedComment:
    polarity: str
    text: str
    date: str
    author: str


@dataclass(frozen=True)
class ScrapeDefaults:
    brand: str = "VOLKSWAGEN"
    model: str = "GOL 1.0 FLEX"
    year: int = 2018
    color: str = "BRANCA"
    fuel_type: str = "FLEX"
    status: str = "IN_CIRCULATION"
    municipality: str = "SÃO PAULO"
    state: str = "SP"


@dataclass(frozen=True)
class VehicleCatalog:
    brand_models: tuple[tuple[str, tuple[str, ...]], ...] = (
        ("VOLKSWAGEN", ("GOL 1.0 FLEX", "POLO 1.6", "JETTA 2.0", "TIGUAN 2.0")),
        ("CHEVROLET", ("ONIX 1.0", "CRUZE 1.4", "TRACKER 1.0", "S10 2.8")),
        ("FIAT", ("UNO 1.0", "PALIO 1.0", "STRADA 1.4", "TORO 1.8")),
        ("FORD", ("KA 1.0", "FOCUS 2.0", "RANGER 3.2", "ECOSPORT 1.6")),
        ("TOYOTA", ("COROLLA 2.0", "HILUX 2.8", "RAV4 2.5", "ETIOS 1.5")),
        ("HONDA", ("CIVIC 2.0", "FIT 1.5", "HR-V 1.8", "CR-V 1.5")),
        ("HYUNDAI", ("HB20 1.0", "CRETA 1.6", "TUCSON 2.0", "ELANTRA 2.0")),
    )
    colors: tuple[str, ...] = ("BRANCA", "PRATA", "PRETA", "VERMELHA", "AZUL", "CINZA")
    fuel_types: tuple[str, ...] = ("FLEX", "GASOLINA", "DIESEL", "ETANOL")
    # (municipality, state); one index always selects both
    locations: tuple[tuple[str, str], ...] = (
        ("SÃO PAULO", "SP"),
        ("RIO DE JANEIRO", "RJ"),
        ("BELO HORIZONTE", "MG"),
        ("SALVADOR", "BA"),
        ("BRASÍLIA", "DF"),
        ("CURITIBA", "PR"),
    )

    year_base: int = 2015
    year_span: int = 8
    chassis_prefix: str = "9BW"
    chassis_alphabet: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    chassis_body_length: int = 14

    lien_label: str = "FIDUCIARY LIEN"
    renewal_due_date: str = "31/12/2024"
    insurance_valid_until: str = "15/08/2025"
    market_reference_month: str = "DEZEMBRO/2024"

    comments: tuple[CannedComment, ...] = (
        CannedComment("positive", "Very reliable and economical vehicle. Recommended!", "15/03/2024", "João S."),
        CannedComment("positive", "Great value for money, never gave me any trouble.", "22/01/2024", "Maria L."),
        CannedComment("negative", "Had a few electrical problems.", "10/12/2023", "Carlos M."),
    )
    # (date, event, location)
    events: tuple[tuple[str, str, str], ...] = (
        ("15/03/2024", "TRANSFER OF OWNERSHIP", "DETRAN-SP"),
        ("22/08/2023", "ANNUAL LICENSING", "DETRAN-SP"),
    )
    fine_event: tuple[str, str] = ("10/05/2023", "MARGINAL TIETÊ - SP")
    fine_event_label: str = "FINE FOR SPEEDING"
    clean_event_label: str = "INSPECTION PASSED"

    defaults: ScrapeDefaults = field(default_factory=ScrapeDefaults)

    @property
    def brands(self) -> tuple[str, ...]:
        return tuple(brand for brand, _ in self.brand_models)

    def models_for(self, brand: str) -> tuple[str, ...]:
        for name, models in self.brand_models:
            if name == brand:
                return models
        raise KeyError(brand)

    def state_for(self, municipality: str) -> str:
        for name, state in self.locations:
            if name == municipality:
                return state
        raise KeyError(municipality)


DEFAULT_CATALOG = VehicleCatalog()
