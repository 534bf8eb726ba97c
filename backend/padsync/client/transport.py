# backend/padsync/client/transport.py
from __future__ import annotations

from typing import Any

import httpx

from .config import ClientSettings


class HttpTransport:
    """하트비트/저장 요청. 실패는 httpx.HTTPError 로 올림"""

    def __init__(self, client: httpx.Client, api_prefix: str = "/api"):
        self.client = client
        self.api_prefix = api_prefix.rstrip("/")

    @classmethod
    def from_settings(cls, cfg: ClientSettings) -> "HttpTransport":
        client = httpx.Client(
            base_url=cfg.BASE_URL,
            headers={"Authorization": f"Bearer {cfg.TOKEN}"},
            timeout=cfg.TIMEOUT_SEC,
        )
        return cls(client, cfg.API_PREFIX)

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        resp = self.client.post(f"{self.api_prefix}{path}", json=payload)
        resp.raise_for_status()
        return resp.json()

    def heartbeat(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._post("/heartbeat", data)

    def save(self, key: str, nonce: str, content: str) -> dict[str, Any]:
        return self._post(f"/pads/{key}/save", {"nonce": nonce, "content": content})

    def bootstrap(self, key: str) -> dict[str, Any]:
        resp = self.client.get(f"{self.api_prefix}/pads/{key}")
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self.client.close()
