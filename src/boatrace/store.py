from __future__ import annotations

from datetime import date
from typing import Dict, Iterator, List, Optional

from loguru import logger

from src.boatrace.api_client import RemoteReadError, ResultsApiClient
from src.boatrace.config import DEFAULT_KIND
from src.boatrace.models import ResultRecord
from src.boatrace.utils.dates import now_millis, parse_record_date, utc_now_iso


def _records_from_payload(payload: Dict[str, object]) -> List[ResultRecord]:
    items = payload.get("items") if payload.get("ok") else None
    if not isinstance(items, list):
        return []
    return [ResultRecord.from_dict(item) for item in items if isinstance(item, dict)]


def sort_by_date_desc(records: List[ResultRecord]) -> List[ResultRecord]:
    """Ordena por data decrescente; datas ilegiveis vao para o fim (ordem estavel)."""
    dated = [(parse_record_date(r.date), r) for r in records]
    valid = [pair for pair in dated if pair[0] is not None]
    invalid = [r for d, r in dated if d is None]
    valid.sort(key=lambda pair: pair[0] or date.min, reverse=True)
    return [r for _, r in valid] + invalid


class ResultStore:
    """Colecao em memoria dos resultados, sincronizada com a API remota."""

    def __init__(self, client: Optional[ResultsApiClient] = None) -> None:
        self.client = client or ResultsApiClient()
        self._records: List[ResultRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ResultRecord]:
        return iter(self._records)

    def all(self) -> List[ResultRecord]:
        return self._records

    def find(self, record_id: str) -> Optional[ResultRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def initialize(self) -> None:
        try:
            payload = self.client.fetch_all()
        except RemoteReadError as exc:
            logger.error("Falha ao carregar resultados da API: {}", exc)
            self._records = []
            return
        self._records = _records_from_payload(payload)
        logger.info("{} resultados carregados da API.", len(self._records))

    # --- escrita remota (sempre seguida de releitura) ---

    def set_write_token(self, token: Optional[str]) -> None:
        self.client.set_write_token(token)

    def _send(self, action: str, data: Dict[str, object], kind: str) -> Dict[str, object]:
        try:
            payload = self.client.send(action, data, kind)
        except RemoteReadError as exc:
            logger.error("Falha ao reler resultados apos '{}': {}", action, exc)
            self._records = []
        else:
            self._records = _records_from_payload(payload)
        return {"ok": True}

    def create_remote(self, data: Dict[str, object], kind: str = DEFAULT_KIND) -> Dict[str, object]:
        return self._send("create", data, kind)

    def update_remote(self, record_id: str, data: Dict[str, object], kind: str = DEFAULT_KIND) -> Dict[str, object]:
        return self._send("update", {"id": record_id, **data}, kind)

    def delete_remote(self, record_id: str, kind: str = DEFAULT_KIND) -> Dict[str, object]:
        return self._send("delete", {"id": record_id}, kind)

    # --- mutacoes apenas locais ---

    def _next_id(self) -> str:
        candidate = now_millis()
        existing = {r.id for r in self._records}
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def add_local(self, data: Dict[str, object]) -> ResultRecord:
        record = ResultRecord.from_dict({**data, "id": self._next_id(), "createdAt": utc_now_iso()})
        self._records.append(record)
        self._records = sort_by_date_desc(self._records)
        return record

    def update_local(self, record_id: str, patch: Dict[str, object]) -> bool:
        for idx, record in enumerate(self._records):
            if record.id == record_id:
                merged = {**record.to_dict(), **patch, "id": record.id}
                self._records[idx] = ResultRecord.from_dict(merged)
                self._records = sort_by_date_desc(self._records)
                return True
        return False

    def remove_local(self, record_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        return len(self._records) != before
