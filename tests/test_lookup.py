import asyncio

import httpx
import pytest

from plates.generator import VehicleRecordGenerator
from service.lookup import PlateLookupService
from service.source_client import BuscaPlacasClient


THREE_ROWS = """
<html><body><table class="dados">
  <tr><td>Marca</td><td>FIAT</td></tr>
  <tr><td>Modelo</td>
      <td>UNO 1.0</td></tr>
  <tr><td>Cor</td><td>PRATA</td></tr>
</table></body></html>
"""

TWO_ROWS = """
<html><body><table>
  <tr><td>Marca</td><td>FIAT</td></tr>
  <tr><td>Modelo</td><td>UNO 1.0</td></tr>
</table></body></html>
"""


class FakeSource:
    def __init__(self, markup: str = "", error: Exception | None = None) -> None:
        self.markup = markup
        self.error = error
        self.calls: list[str] = []

    async def fetch_raw_markup(self, plate: str) -> str:
        self.calls.append(plate)
        if self.error is not None:
            raise self.error
        return self.markup


class HangingSource:
    def __init__(self) -> None:
        self.started = asyncio.Event()

    async def fetch_raw_markup(self, plate: str) -> str:
        self.started.set()
        await asyncio.sleep(3600)
        return ""


@pytest.fixture
def generator():
    return VehicleRecordGenerator()


# ── Format validation ───────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["AB1234", "", "1234567", "ABCD1234", "ABC-12D4", "ÁBC1234"])
async def test_invalid_plate_returns_none_without_network(generator, raw):
    source = FakeSource(markup=THREE_ROWS)
    service = PlateLookupService(source=source, generator=generator)
    assert await service.lookup(raw) is None
    assert source.calls == []
    assert service.outcomes["not_found"] == 1


@pytest.mark.asyncio
async def test_mercosul_plate_is_looked_up(generator):
    source = FakeSource(markup=THREE_ROWS)
    service = PlateLookupService(source=source, generator=generator)
    record = await service.lookup("abc1d23")
    assert source.calls == ["ABC1D23"]
    assert record is not None
    assert record.plate == "ABC-1D23"


# ── Live extraction ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_three_rows_yield_live_record_with_defaults(generator):
    service = PlateLookupService(source=FakeSource(markup=THREE_ROWS), generator=generator)
    record = await service.lookup("abc-1234")

    assert record.plate == "ABC-1234"
    assert (record.brand, record.model, record.color) == ("FIAT", "UNO 1.0", "PRATA")
    assert record.year == 2018
    assert record.fuel_type == "FLEX"
    assert record.status == "IN_CIRCULATION"
    assert record.municipality == "SÃO PAULO"
    assert record.state == "SP"
    assert service.outcomes["live"] == 1


@pytest.mark.asyncio
async def test_two_rows_fall_back_to_generated_record(generator):
    service = PlateLookupService(source=FakeSource(markup=TWO_ROWS), generator=generator)
    record = await service.lookup("ABC1234")
    assert record == generator.generate("ABC1234")
    assert service.outcomes["fallback_insufficient"] == 1


# ── Fallback on upstream failure ────────────────────────────────────


@pytest.mark.asyncio
async def test_upstream_error_falls_back_deterministically(generator):
    service = PlateLookupService(
        source=FakeSource(error=httpx.ConnectError("boom")),
        generator=generator,
    )
    first = await service.lookup("abc1234")
    second = await service.lookup("ABC-1234")
    assert first == second == generator.generate("ABC1234")
    assert (first.brand, first.model, first.year) == (second.brand, second.model, second.year)
    assert service.outcomes["fallback_error"] == 2


@pytest.mark.asyncio
async def test_parse_error_falls_back(generator):
    service = PlateLookupService(source=FakeSource(error=ValueError("bad markup")), generator=generator)
    assert await service.lookup("XYZ9876") == generator.generate("XYZ9876")


@pytest.mark.asyncio
async def test_generator_fault_propagates(generator, monkeypatch):
    def boom(_plate):
        raise RuntimeError("generator broke")

    monkeypatch.setattr(generator, "generate", boom)
    service = PlateLookupService(source=FakeSource(error=httpx.ReadTimeout("slow")), generator=generator)
    with pytest.raises(RuntimeError):
        await service.lookup("ABC1234")


@pytest.mark.asyncio
async def test_cancellation_is_not_absorbed(generator):
    source = HangingSource()
    service = PlateLookupService(source=source, generator=generator)
    task = asyncio.create_task(service.lookup("ABC1234"))
    await source.started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert service.outcomes["fallback_error"] == 0


# ── Source client ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_client_sends_plate_and_browser_headers():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=THREE_ROWS)

    client = BuscaPlacasClient(
        base_url="https://example.test/",
        partner_ref="ref123",
        user_agent="TestBrowser/1.0",
        transport=httpx.MockTransport(handler),
    )
    markup = await client.fetch_raw_markup("ABC1234")

    assert markup == THREE_ROWS
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/resultado.php"
    assert request.url.params["ref"] == "ref123"
    assert request.url.params["placa"] == "ABC1234"
    assert request.headers["User-Agent"] == "TestBrowser/1.0"
    assert request.headers["Accept-Language"].startswith("pt-BR")


@pytest.mark.asyncio
async def test_client_raises_on_non_2xx():
    client = BuscaPlacasClient(
        base_url="https://example.test",
        partner_ref="ref123",
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="down")),
    )
    with pytest.raises(httpx.HTTPStatusError):
        await client.fetch_raw_markup("ABC1234")


@pytest.mark.asyncio
async def test_non_2xx_and_timeout_fall_back(generator):
    def timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    for transport in (
        httpx.MockTransport(lambda request: httpx.Response(500, text=THREE_ROWS)),
        httpx.MockTransport(timeout),
    ):
        client = BuscaPlacasClient(base_url="https://example.test", partner_ref="x", transport=transport)
        service = PlateLookupService(source=client, generator=generator)
        assert await service.lookup("ABC1234") == generator.generate("ABC1234")


@pytest.mark.asyncio
async def test_unreachable_source_falls_back(generator):
    client = BuscaPlacasClient(base_url="http://127.0.0.1:1", partner_ref="x", timeout_seconds=2.0)
    service = PlateLookupService(source=client, generator=generator)
    assert await service.lookup("ABC1234") == generator.generate("ABC1234")
    assert service.outcomes["fallback_error"] == 1
