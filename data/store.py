"""Remote store gateways: Supabase (PostgREST over httpx) and an in-memory twin."""

import contextlib
import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from config.settings import StoreSettings

logger = logging.getLogger(__name__)

Filter = Tuple[str, str, Any]  # (column, operator, value)

_OPERATORS = ("eq", "neq")


class StoreError(Exception):
    """The backing store rejected or failed a read or write."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def eq(column: str, value: Any) -> Filter:
    return (column, "eq", value)


def neq(column: str, value: Any) -> Filter:
    return (column, "neq", value)


def _require_filters(filters: Optional[List[Filter]], action: str) -> List[Filter]:
    if not filters:
        raise StoreError(f"{action} without filters is not allowed")
    for column, op, _ in filters:
        if op not in _OPERATORS:
            raise StoreError(f"Unsupported filter operator {op!r} on {column}")
    return list(filters)


class InMemoryStore:
    """Dictionary-backed store with the same call surface as SupabaseStore."""

    def __init__(self, tables: Optional[Dict[str, List[dict]]] = None):
        self._tables: Dict[str, List[dict]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }

    @staticmethod
    def _matches(row: dict, filters: Iterable[Filter]) -> bool:
        for column, op, value in filters:
            current = row.get(column)
            if op == "eq" and current != value:
                return False
            if op == "neq" and (current is None or current == value):
                # PostgREST neq never matches NULL
                return False
        return True

    def _rows(self, collection: str) -> List[dict]:
        return self._tables.setdefault(collection, [])

    def select(
        self,
        collection: str,
        columns: str = "*",
        filters: Optional[List[Filter]] = None,
        order: Optional[str] = None,
        ascending: bool = True,
    ) -> List[dict]:
        for column, op, _ in filters or []:
            if op not in _OPERATORS:
                raise StoreError(f"Unsupported filter operator {op!r} on {column}")
        rows = [r for r in self._rows(collection) if self._matches(r, filters or [])]
        if order:
            present = [r for r in rows if r.get(order) is not None]
            missing = [r for r in rows if r.get(order) is None]
            present.sort(key=lambda r: r[order], reverse=not ascending)
            rows = present + missing
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        return copy.deepcopy(rows)

    def insert(self, collection: str, rows: List[dict]) -> List[dict]:
        inserted = []
        table = self._rows(collection)
        for row in rows:
            new_row = dict(row)
            new_row.setdefault("id", str(uuid.uuid4()))
            new_row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            if any(r.get("id") == new_row["id"] for r in table):
                raise StoreError(f"Duplicate id {new_row['id']} in {collection}", status_code=409)
            table.append(new_row)
            inserted.append(new_row)
        return copy.deepcopy(inserted)

    def update(self, collection: str, patch: dict, filters: List[Filter]) -> List[dict]:
        filters = _require_filters(filters, "Update")
        updated = []
        for row in self._rows(collection):
            if self._matches(row, filters):
                row.update(patch)
                updated.append(row)
        return copy.deepcopy(updated)

    def delete(self, collection: str, filters: List[Filter]) -> List[dict]:
        filters = _require_filters(filters, "Delete")
        table = self._rows(collection)
        removed = [r for r in table if self._matches(r, filters)]
        self._tables[collection] = [r for r in table if not self._matches(r, filters)]
        return copy.deepcopy(removed)

    def upsert(self, collection: str, rows: List[dict], on_conflict: str = "id") -> List[dict]:
        result = []
        table = self._rows(collection)
        for row in rows:
            existing = next(
                (r for r in table if on_conflict in row and r.get(on_conflict) == row[on_conflict]),
                None,
            )
            if existing is not None:
                existing.update(row)
                result.append(copy.deepcopy(existing))
            else:
                result.extend(self.insert(collection, [row]))
        return result


class SupabaseStore:
    """PostgREST client for a Supabase project."""

    def __init__(
        self,
        url: str,
        key: str,
        schema: str = "public",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        if not url or not key:
            raise ValueError("Supabase URL and key are required")
        self.url = url.rstrip("/")
        self.key = key
        self.schema = schema
        self.timeout = timeout
        self._client = client

    def _endpoint(self, collection: str) -> str:
        return f"{self.url}/rest/v1/{collection}"

    def _headers(self, write: bool = False, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Accept": "application/json",
        }
        if self.schema and self.schema != "public":
            headers["Accept-Profile"] = self.schema
            if write:
                headers["Content-Profile"] = self.schema
        if write:
            headers["Content-Type"] = "application/json"
            headers["Prefer"] = prefer or "return=representation"
        return headers

    @staticmethod
    def _filter_params(filters: Optional[List[Filter]]) -> List[Tuple[str, str]]:
        params = []
        for column, op, value in filters or []:
            if op not in _OPERATORS:
                raise StoreError(f"Unsupported filter operator {op!r} on {column}")
            if value is None:
                params.append((column, "is.null" if op == "eq" else "not.is.null"))
            elif isinstance(value, bool):
                params.append((column, f"{op}.{str(value).lower()}"))
            else:
                params.append((column, f"{op}.{value}"))
        return params

    @contextlib.contextmanager
    def _session(self):
        if self._client is not None:
            yield self._client
        else:
            with httpx.Client(timeout=self.timeout) as client:
                yield client

    def _request(
        self,
        method: str,
        collection: str,
        params: List[Tuple[str, str]],
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> List[dict]:
        write = method != "GET"
        try:
            with self._session() as client:
                response = client.request(
                    method,
                    self._endpoint(collection),
                    params=params,
                    json=payload,
                    headers=self._headers(write=write, prefer=prefer),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            detail = exc.response.text[:200]
            logger.warning("Supabase %s %s failed (%s): %s", method, collection, status, detail)
            raise StoreError(f"{method} {collection} failed with status {status}: {detail}", status) from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase %s %s transport error: %s", method, collection, exc)
            raise StoreError(f"{method} {collection} failed: {exc}") from exc

        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as exc:
            raise StoreError(f"{method} {collection} returned invalid JSON") from exc
        if isinstance(data, dict):
            return [data]
        return data

    def select(
        self,
        collection: str,
        columns: str = "*",
        filters: Optional[List[Filter]] = None,
        order: Optional[str] = None,
        ascending: bool = True,
    ) -> List[dict]:
        params = [("select", columns)] + self._filter_params(filters)
        if order:
            params.append(("order", f"{order}.{'asc' if ascending else 'desc'}"))
        return self._request("GET", collection, params)

    def insert(self, collection: str, rows: List[dict]) -> List[dict]:
        return self._request("POST", collection, [], payload=rows)

    def update(self, collection: str, patch: dict, filters: List[Filter]) -> List[dict]:
        filters = _require_filters(filters, "Update")
        return self._request("PATCH", collection, self._filter_params(filters), payload=patch)

    def delete(self, collection: str, filters: List[Filter]) -> List[dict]:
        filters = _require_filters(filters, "Delete")
        return self._request("DELETE", collection, self._filter_params(filters))

    def upsert(self, collection: str, rows: List[dict], on_conflict: str = "id") -> List[dict]:
        return self._request(
            "POST",
            collection,
            [("on_conflict", on_conflict)],
            payload=rows,
            prefer="resolution=merge-duplicates,return=representation",
        )


def build_store(settings: StoreSettings, seed_rows: Optional[Dict[str, List[dict]]] = None):
    """Supabase when credentials are configured, otherwise an in-memory demo store."""
    if settings.is_configured:
        logger.info("Using Supabase store at %s", settings.url)
        return SupabaseStore(settings.url, settings.key, settings.schema, settings.timeout)
    logger.warning("SUPABASE_URL/SUPABASE key not set; using in-memory demo store")
    return InMemoryStore(seed_rows)
