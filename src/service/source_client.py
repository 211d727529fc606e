from __future__ import annotations

from typing import Protocol

import httpx


class ExternalSourceClient(Protocol):
    async def fetch_raw_markup(self, plate: str) -> str: ...


class BuscaPlacasClient:
    """Fetches the public result page for a plate as raw HTML.

    Non-2xx responses, timeouts and transport errors raise ``httpx`` exceptions;
    the caller decides what to do with them.
    """

    def __init__(
        self,
        base_url: str,
        partner_ref: str,
        timeout_seconds: float = 10.0,
        user_agent: str = "Mozilla/5.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.partner_ref = partner_ref
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
            "Accept-Encoding": "gzip, deflate",
            "DNT": "1",
            "Upgrade-Insecure-Requests": "1",
        }

    async def fetch_raw_markup(self, plate: str) -> str:
        url = f"{self.base_url}/resultado.php"
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            headers=self._headers(),
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            resp = await client.get(url, params={"ref": self.partner_ref, "placa": plate})
            resp.raise_for_status()
        return resp.text
