"""Cliente HTTP do web app (Apps Script) que guarda os resultados na planilha.

Leitura: GET no endpoint devolvendo ``{"ok": bool, "items": [...]}``.
Escrita: POST ``text/plain`` com ``{token, action, kind, data}``. A resposta do
POST nao e inspecionada; apos cada escrita o cliente sempre refaz a leitura
completa e o chamador fica com o que o servidor tiver nesse momento
(consistencia eventual, ultima leitura vence).
"""

from __future__ import annotations

import json
import re
from typing import Dict, Optional

import requests
from loguru import logger

from src.boatrace.config import ACTIONS, DEFAULT_KIND, KINDS, settings
from src.boatrace.utils.dates import now_millis

# callbackName({...}); -> {...}
_JSONP_RE = re.compile(r"^\s*[\w$.]+\s*\((?P<body>.*)\)\s*;?\s*$", re.DOTALL)


class MissingWriteTokenError(RuntimeError):
    pass


class RemoteReadError(RuntimeError):
    pass


def _unwrap_jsonp(text: str) -> str:
    m = _JSONP_RE.match(text)
    return m.group("body") if m else text


def parse_payload(text: str) -> Dict[str, object]:
    try:
        payload = json.loads(_unwrap_jsonp(text))
    except json.JSONDecodeError as exc:
        raise RemoteReadError(f"Resposta invalida da API: {exc}") from exc
    if not isinstance(payload, dict):
        raise RemoteReadError(f"Resposta inesperada da API: {type(payload).__name__}")
    return payload


class ResultsApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url or settings.API_BASE_URL
        self.timeout = settings.HTTP_TIMEOUT_SEC if timeout is None else timeout
        self._session = session or requests.Session()
        self._write_token: Optional[str] = None

    def __enter__(self) -> "ResultsApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def set_write_token(self, token: Optional[str]) -> None:
        self._write_token = token or None

    @property
    def has_write_token(self) -> bool:
        return bool(self._write_token)

    def fetch_all(self) -> Dict[str, object]:
        params = {"t": now_millis()}
        try:
            resp = self._session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise RemoteReadError(f"Falha ao ler {self.base_url}: {exc}") from exc
        payload = parse_payload(resp.text)
        items = payload.get("items")
        logger.debug("API retornou {} itens (ok={})", len(items) if isinstance(items, list) else 0, payload.get("ok"))
        return payload

    def post(self, action: str, data: Dict[str, object], kind: str = DEFAULT_KIND) -> None:
        """Envia a acao sem olhar a resposta; falha de rede vira apenas warning."""
        if action not in ACTIONS:
            raise ValueError(f"Acao invalida: {action!r} (esperado: {', '.join(ACTIONS)})")
        if kind not in KINDS:
            raise ValueError(f"Kind invalido: {kind!r} (esperado: {', '.join(KINDS)})")
        if not self._write_token:
            raise MissingWriteTokenError("write token is missing")

        body = {"token": self._write_token, "action": action, "kind": kind, "data": data}
        try:
            self._session.post(
                self.base_url,
                data=json.dumps(body, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": settings.WRITE_CONTENT_TYPE},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("POST {} ({}) falhou: {}", action, kind, exc)
        else:
            logger.info("POST {} ({}) enviado.", action, kind)

    def send(self, action: str, data: Dict[str, object], kind: str = DEFAULT_KIND) -> Dict[str, object]:
        self.post(action, data, kind)
        return self.fetch_all()

    def create(self, data: Dict[str, object], kind: str = DEFAULT_KIND) -> Dict[str, object]:
        return self.send("create", data, kind)

    def update(self, record_id: str, data: Dict[str, object], kind: str = DEFAULT_KIND) -> Dict[str, object]:
        return self.send("update", {"id": record_id, **data}, kind)

    def delete(self, record_id: str, kind: str = DEFAULT_KIND) -> Dict[str, object]:
        return self.send("delete", {"id": record_id}, kind)
