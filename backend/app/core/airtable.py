"""
Airtable records client.

Thin wrapper over the Airtable REST API. The base holds one table per
warehouse concern; `TABLE_NAMES` maps the logical names used in code to the
table names in the base, and `get_tables()` hands out a `Table` handle per
logical name.
"""
import logging
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote

import requests

from backend.app.core.config import settings
from backend.app.core.errors import ApiError

logger = logging.getLogger(__name__)

# Airtable rejects batch writes of more than 10 records
BATCH_SIZE = 10

TABLE_NAMES: Dict[str, str] = {
    "suppliers": "Suppliers",
    "raw_materials": "Raw Materials Catalog",
    "raw_materials_inventory": "Raw Materials",
    "finished_goods": "Finished Goods",
    "stock_movement": "Stock Movement",
    "general_warehouse": "General Warehouse",
    "stock_transfer": "Stock Transfer",
    "oyarifa_retail_warehouse": "Oyarifa Retail Warehouse",
    "finished_goods_warehouse": "Finished Goods Warehouse",
    "az_bulk_warehouse": "A-Z Bulk Warehouse",
    "raw_material_warehouse": "Raw Material Warehouse",
    "manufacturing": "Manufacturing",
    "team_members": "Team Members",
    "deliveries": "Deliveries",
    "delivery_stops": "Delivery Stops",
    "riders": "Riders",
}


class AirtableError(ApiError):
    pass


class AirtableConfigError(RuntimeError):
    pass


def _batches(items: Sequence, size: int = BATCH_SIZE):
    for i in range(0, len(items), size):
        yield items[i:i + size]


class AirtableClient:
    def __init__(self, api_key: str, base_id: str, api_url: str = "https://api.airtable.com/v0",
                 timeout: int = 15, session: Optional[requests.Session] = None):
        if not api_key:
            raise AirtableConfigError("AIRTABLE_API_KEY environment variable is not set")
        if not base_id:
            raise AirtableConfigError("AIRTABLE_BASE_ID environment variable is not set")

        self.base_id = base_id
        self.base_url = f"{api_url.rstrip('/')}/{base_id}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def _table_url(self, table_name: str, record_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/{quote(table_name, safe='')}"
        if record_id:
            url = f"{url}/{quote(record_id, safe='')}"
        return url

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if not response.ok:
            logger.warning("Airtable %s %s failed: %s %s", method, url, response.status_code, response.text)
            raise AirtableError.from_response(
                response, f"Airtable API error: {response.status_code} - {response.text}"
            )
        if not response.content:
            return {}
        return response.json()

    def list(
        self,
        table_name: str,
        filter_by_formula: Optional[str] = None,
        sort: Optional[Iterable[Dict[str, str]]] = None,
        max_records: Optional[int] = None,
        page_size: Optional[int] = None,
        view: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch every record of a table, following `offset` until the last page."""
        params: Dict[str, Any] = {}
        if filter_by_formula:
            params["filterByFormula"] = filter_by_formula
        for i, s in enumerate(sort or []):
            params[f"sort[{i}][field]"] = s["field"]
            params[f"sort[{i}][direction]"] = s.get("direction", "asc")
        if max_records:
            params["maxRecords"] = str(max_records)
        if page_size:
            params["pageSize"] = str(page_size)
        if view:
            params["view"] = view

        url = self._table_url(table_name)
        records: List[Dict[str, Any]] = []
        offset = None
        while True:
            if offset:
                params["offset"] = offset
            data = self._request("GET", url, params=dict(params))
            records.extend(data.get("records", []))
            offset = data.get("offset")
            if not offset:
                break
        return records

    def get(self, table_name: str, record_id: str) -> Dict[str, Any]:
        return self._request("GET", self._table_url(table_name, record_id))

    def create(self, table_name: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", self._table_url(table_name), json={"fields": fields})

    def create_many(self, table_name: str, records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Create records in batches. Each item is `{"fields": {...}}`."""
        created: List[Dict[str, Any]] = []
        for batch in _batches(list(records)):
            data = self._request("POST", self._table_url(table_name), json={"records": batch})
            created.extend(data.get("records", []))
        return created

    def update(self, table_name: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", self._table_url(table_name, record_id), json={"fields": fields})

    def update_many(self, table_name: str, records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Update records in batches. Each item is `{"id": ..., "fields": {...}}`."""
        updated: List[Dict[str, Any]] = []
        for batch in _batches(list(records)):
            data = self._request("PATCH", self._table_url(table_name), json={"records": batch})
            updated.extend(data.get("records", []))
        return updated

    def delete(self, table_name: str, record_id: str) -> None:
        self._request("DELETE", self._table_url(table_name, record_id))

    def delete_many(self, table_name: str, record_ids: Sequence[str]) -> None:
        for batch in _batches(list(record_ids)):
            params = [("records[]", record_id) for record_id in batch]
            self._request("DELETE", self._table_url(table_name), params=params)

    def table(self, table_name: str) -> "Table":
        return Table(self, table_name)


class Table:
    """A handle on one table of the base; mirrors the client methods without the table argument."""

    def __init__(self, client: AirtableClient, name: str):
        self.client = client
        self.name = name

    def __repr__(self):
        return f"Table({self.name!r})"

    def list(self, **options) -> List[Dict[str, Any]]:
        return self.client.list(self.name, **options)

    def get(self, record_id: str) -> Dict[str, Any]:
        return self.client.get(self.name, record_id)

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.create(self.name, fields)

    def create_many(self, records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self.client.create_many(self.name, records)

    def update(self, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.update(self.name, record_id, fields)

    def update_many(self, records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self.client.update_many(self.name, records)

    def delete(self, record_id: str) -> None:
        self.client.delete(self.name, record_id)

    def delete_many(self, record_ids: Sequence[str]) -> None:
        self.client.delete_many(self.name, record_ids)


@lru_cache
def get_airtable() -> AirtableClient:
    """FastAPI dependency returning the process-wide client."""
    return AirtableClient(
        settings.AIRTABLE_API_KEY,
        settings.AIRTABLE_BASE_ID,
        api_url=settings.AIRTABLE_API_URL,
        timeout=settings.AIRTABLE_TIMEOUT,
    )


def get_tables(client: Optional[AirtableClient] = None) -> Dict[str, Table]:
    client = client or get_airtable()
    return {key: client.table(name) for key, name in TABLE_NAMES.items()}
