import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends

from backend.app.core.airtable import AirtableClient, AirtableError, TABLE_NAMES, get_airtable
from backend.app.core.errors import ApiError
from backend.app.services.export import filter_data, sort_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordMapping:
    """
    How one Airtable table is exposed by the API.

    `fields` maps the API attribute name to the Airtable field name. Values
    missing from a record are filled from `defaults` (empty string otherwise);
    on create, unset attributes are filled from `create_defaults`, and
    `date_field` is set to today's date when not given. Attributes listed in
    `linked` are linked-record fields: a single id is sent as a one-item list.
    """
    resource: str
    table: str
    label: str
    fields: Dict[str, str]
    sort: List[Dict[str, str]] = field(default_factory=list)
    defaults: Dict[str, Any] = field(default_factory=dict)
    create_defaults: Dict[str, Any] = field(default_factory=dict)
    linked: Tuple[str, ...] = ()
    date_field: Optional[str] = None
    search_fields: Tuple[str, ...] = ()

    @property
    def table_name(self) -> str:
        return TABLE_NAMES[self.table]


SUPPLIERS = RecordMapping(
    resource="suppliers",
    table="suppliers",
    label="Supplier",
    fields={
        "supplier_name": "Supplier Name",
        "contact_person": "Contact Person",
        "phone": "Phone",
        "email": "Email",
        "address": "Address",
        "website": "Website",
        "supplier_type": "Supplier Type",
        "status": "Status",
    },
    sort=[{"field": "Supplier Name", "direction": "asc"}],
    create_defaults={"contact_person": "", "phone": "", "email": "", "address": "", "website": ""},
    search_fields=("supplier_name", "contact_person", "email", "phone"),
)

RAW_MATERIALS = RecordMapping(
    resource="raw-materials",
    table="raw_materials_inventory",
    label="Raw material",
    fields={
        "material_name": "Material Name",
        "specification": "Specification",
        "unit_of_measurement": "Unit of Measurement",
        "unit_cost": "Unit Cost",
        "current_stock": "Current Stock",
    },
    sort=[{"field": "Material Name", "direction": "asc"}],
    defaults={"specification": "Clear", "unit_cost": 0, "current_stock": 0},
    create_defaults={"specification": "Clear", "unit_of_measurement": "", "unit_cost": 0, "current_stock": 0},
    search_fields=("material_name", "specification"),
)

FINISHED_GOODS = RecordMapping(
    resource="finished-goods",
    table="finished_goods",
    label="Finished good",
    fields={
        "product_name": "Product Name",
        "pack_size": "Pack Size/Notes",
        "available_quantity": "Available Quantity",
        "price": "Price",
        "status": "Status",
    },
    sort=[{"field": "Product Name", "direction": "asc"}],
    defaults={"available_quantity": 0, "price": 0, "status": "Available"},
    create_defaults={"pack_size": "", "available_quantity": 0, "price": 0, "status": "Available"},
    search_fields=("product_name", "pack_size", "status"),
)

STOCK_MOVEMENT = RecordMapping(
    resource="stock-movement",
    table="stock_movement",
    label="Stock movement",
    fields={
        "material": "Material",
        "transaction_type": "Transaction Type",
        "quantity": "Quantity",
        "unit_cost": "Unit Cost",
        "reason": "Reason",
        "from_location": "From",
        "to_location": "To",
        "date": "Date",
    },
    sort=[{"field": "Date", "direction": "desc"}],
    defaults={"material": [], "quantity": 0, "unit_cost": 0},
    create_defaults={"unit_cost": 0, "reason": "", "from_location": "", "to_location": ""},
    linked=("material",),
    date_field="date",
    search_fields=("transaction_type", "reason", "from_location", "to_location", "date"),
)

STOCK_TRANSFER = RecordMapping(
    resource="stock-transfer",
    table="stock_transfer",
    label="Stock transfer",
    fields={
        "material": "Material",
        "quantity": "Quantity Transferred",
        "from_warehouse": "From Warehouse",
        "to_warehouse": "To Warehouse",
        "date": "Date",
        "status": "Status",
        "remarks": "Remarks",
    },
    sort=[{"field": "Date", "direction": "desc"}],
    defaults={"material": [], "quantity": 0, "from_warehouse": [], "to_warehouse": []},
    create_defaults={"status": "Pending", "remarks": ""},
    linked=("material", "from_warehouse", "to_warehouse"),
    date_field="date",
    search_fields=("status", "remarks", "date"),
)

DELIVERIES = RecordMapping(
    resource="deliveries",
    table="deliveries",
    label="Delivery",
    fields={
        "delivery_id": "Delivery ID",
        "customer": "Customer",
        "total_stops": "Total Stops",
        "rider": "Rider",
        "date": "Date",
        "status": "Status",
        "notes": "Notes",
    },
    sort=[{"field": "Date", "direction": "desc"}],
    defaults={"total_stops": 0, "rider": []},
    create_defaults={"delivery_id": "", "total_stops": 0, "status": "Pending", "notes": ""},
    linked=("rider",),
    date_field="date",
    search_fields=("delivery_id", "customer", "status", "date"),
)

MANUFACTURING = RecordMapping(
    resource="manufacturing",
    table="manufacturing",
    label="Manufacturing order",
    fields={
        "manufacturing_id": "Manufacturing ID",
        "product": "Product",
        "quantity": "Quantity",
        "production_line": "Production Line",
        "created_on": "Created on",
        "status": "Status",
        "notes": "Notes",
    },
    sort=[{"field": "Created on", "direction": "desc"}],
    defaults={"product": [], "quantity": 0},
    create_defaults={"manufacturing_id": "", "production_line": "", "status": "Pending", "notes": ""},
    linked=("product",),
    date_field="created_on",
    search_fields=("manufacturing_id", "production_line", "status"),
)

RESOURCES: Dict[str, RecordMapping] = {
    m.resource: m
    for m in (SUPPLIERS, RAW_MATERIALS, FINISHED_GOODS, STOCK_MOVEMENT, STOCK_TRANSFER, DELIVERIES, MANUFACTURING)
}


def serialize_record(record: Dict[str, Any], mapping: RecordMapping) -> Dict[str, Any]:
    """Flatten an Airtable record into the API shape."""
    fields = record.get("fields") or {}
    data: Dict[str, Any] = {"id": record.get("id")}
    for name, airtable_field in mapping.fields.items():
        value = fields.get(airtable_field)
        if value is None or value == "":
            value = mapping.defaults.get(name, "")
        data[name] = value
    data["created_time"] = fields.get("Created Time") or record.get("createdTime")
    return data


def to_airtable_fields(data: Dict[str, Any], mapping: RecordMapping) -> Dict[str, Any]:
    """Translate API attributes to Airtable fields, skipping unset (None) values."""
    fields: Dict[str, Any] = {}
    for name, value in data.items():
        if value is None or name not in mapping.fields:
            continue
        if name in mapping.linked and isinstance(value, str):
            value = [value] if value else []
        fields[mapping.fields[name]] = value
    return fields


def with_create_defaults(data: Dict[str, Any], mapping: RecordMapping) -> Dict[str, Any]:
    filled = dict(data)
    for name, default in mapping.create_defaults.items():
        if filled.get(name) is None:
            filled[name] = default
    if mapping.date_field and not filled.get(mapping.date_field):
        filled[mapping.date_field] = date.today().isoformat()
    return filled


class RecordService:
    def __init__(self, client: AirtableClient):
        self.client = client

    def list(
        self,
        mapping: RecordMapping,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        direction: str = "asc",
        filter_by_formula: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        records = self.client.list(
            mapping.table_name,
            sort=mapping.sort,
            filter_by_formula=filter_by_formula,
        )
        rows = [serialize_record(r, mapping) for r in records]
        if search:
            rows = filter_data(rows, search, mapping.search_fields)
        if sort_by:
            rows = sort_data(rows, sort_by, direction)
        return rows

    def get(self, mapping: RecordMapping, record_id: str) -> Dict[str, Any]:
        try:
            record = self.client.get(mapping.table_name, record_id)
        except AirtableError as e:
            raise _not_found(e, mapping, record_id)
        return serialize_record(record, mapping)

    def create(self, mapping: RecordMapping, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = to_airtable_fields(with_create_defaults(data, mapping), mapping)
        record = self.client.create(mapping.table_name, fields)
        logger.info("Created %s %s", mapping.label.lower(), record.get("id"))
        return serialize_record(record, mapping)

    def update(self, mapping: RecordMapping, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = to_airtable_fields(data, mapping)
        try:
            record = self.client.update(mapping.table_name, record_id, fields)
        except AirtableError as e:
            raise _not_found(e, mapping, record_id)
        return serialize_record(record, mapping)

    def delete(self, mapping: RecordMapping, record_id: str) -> None:
        try:
            self.client.delete(mapping.table_name, record_id)
        except AirtableError as e:
            raise _not_found(e, mapping, record_id)
        logger.info("Deleted %s %s", mapping.label.lower(), record_id)


class RecordNotFoundError(ApiError):
    def __init__(self, label: str, record_id: str):
        super().__init__(404, f"{label} not found", code="NOT_FOUND", details={"id": record_id})


def _not_found(error: AirtableError, mapping: RecordMapping, record_id: str) -> ApiError:
    """Swap a store 404 for a not-found error naming the record type; other errors pass through."""
    if error.status_code == 404:
        return RecordNotFoundError(mapping.label, record_id)
    return error


def get_record_service(client: AirtableClient = Depends(get_airtable)) -> RecordService:
    return RecordService(client)
