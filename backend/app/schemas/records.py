import re
from typing import Annotated, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, EmailStr, Field, model_validator

PHONE_RE = re.compile(r"^\+?[\d\s\-()]+$")
URL_RE = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

SupplierType = Literal["Factory", "Trading Company"]
SupplierStatus = Literal["Active", "Inactive"]
Specification = Literal["Clear", "Translucent", "Color"]
FinishedGoodStatus = Literal["Available", "Out of Stock", "Reserved", "Pending"]
TransactionType = Literal["In", "Out"]
MovementReason = Literal["New Stock", "Stock Adjustment", "Manufacturing Order"]
TransferStatus = Literal["Pending", "In Transit", "Completed", "Cancelled"]
OrderStatus = Literal["Pending", "In Progress", "Completed", "Cancelled"]


def _check_phone(value):
    if value and not PHONE_RE.match(value):
        raise ValueError("Invalid phone number")
    return value


def _check_url(value):
    if value and not URL_RE.match(value):
        raise ValueError("Invalid URL")
    return value


PhoneStr = Annotated[str, AfterValidator(_check_phone)]
UrlStr = Annotated[str, AfterValidator(_check_url)]


def _check_distinct_warehouses(model):
    if model.from_warehouse and model.to_warehouse and model.from_warehouse == model.to_warehouse:
        raise ValueError("Source and destination warehouses must be different")
    return model


# Suppliers

class SupplierCreate(BaseModel):
    supplier_name: str = Field(min_length=1)
    contact_person: Optional[str] = None
    phone: Optional[PhoneStr] = None
    email: Optional[Union[EmailStr, Literal[""]]] = None
    address: Optional[str] = None
    website: Optional[UrlStr] = None
    supplier_type: Optional[SupplierType] = None
    status: Optional[SupplierStatus] = None


class SupplierUpdate(BaseModel):
    supplier_name: Optional[str] = Field(default=None, min_length=1)
    contact_person: Optional[str] = None
    phone: Optional[PhoneStr] = None
    email: Optional[Union[EmailStr, Literal[""]]] = None
    address: Optional[str] = None
    website: Optional[UrlStr] = None
    supplier_type: Optional[SupplierType] = None
    status: Optional[SupplierStatus] = None


# Raw materials

class RawMaterialCreate(BaseModel):
    material_name: str = Field(min_length=1)
    specification: Optional[Specification] = None
    unit_of_measurement: Optional[str] = None
    unit_cost: Optional[float] = Field(default=None, ge=0)
    current_stock: Optional[float] = Field(default=None, ge=0)


class RawMaterialUpdate(BaseModel):
    material_name: Optional[str] = Field(default=None, min_length=1)
    specification: Optional[Specification] = None
    unit_of_measurement: Optional[str] = None
    unit_cost: Optional[float] = Field(default=None, ge=0)
    current_stock: Optional[float] = Field(default=None, ge=0)


# Finished goods

class FinishedGoodCreate(BaseModel):
    product_name: str = Field(min_length=1)
    pack_size: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    available_quantity: Optional[float] = Field(default=None, ge=0)
    status: Optional[FinishedGoodStatus] = None


class FinishedGoodUpdate(BaseModel):
    product_name: Optional[str] = Field(default=None, min_length=1)
    pack_size: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    available_quantity: Optional[float] = Field(default=None, ge=0)
    status: Optional[FinishedGoodStatus] = None


# Stock movement

class StockMovementCreate(BaseModel):
    material: str = Field(min_length=1)
    transaction_type: TransactionType
    quantity: float = Field(ge=0.01)
    unit_cost: Optional[float] = Field(default=None, ge=0)
    reason: Optional[MovementReason] = None
    from_location: Optional[str] = Field(default=None, alias="from")
    to_location: Optional[str] = Field(default=None, alias="to")
    date: Optional[str] = None

    model_config = {"populate_by_name": True}


class StockMovementUpdate(BaseModel):
    material: Optional[str] = Field(default=None, min_length=1)
    transaction_type: Optional[TransactionType] = None
    quantity: Optional[float] = Field(default=None, ge=0.01)
    unit_cost: Optional[float] = Field(default=None, ge=0)
    reason: Optional[MovementReason] = None
    from_location: Optional[str] = Field(default=None, alias="from")
    to_location: Optional[str] = Field(default=None, alias="to")
    date: Optional[str] = None

    model_config = {"populate_by_name": True}


# Stock transfer

class StockTransferCreate(BaseModel):
    material: str = Field(min_length=1)
    quantity: float = Field(ge=0.01)
    from_warehouse: str = Field(min_length=1)
    to_warehouse: str = Field(min_length=1)
    date: Optional[str] = None
    remarks: Optional[str] = None
    status: Optional[TransferStatus] = None

    @model_validator(mode="after")
    def distinct_warehouses(self):
        return _check_distinct_warehouses(self)


class StockTransferUpdate(BaseModel):
    material: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[float] = Field(default=None, ge=0.01)
    from_warehouse: Optional[str] = Field(default=None, min_length=1)
    to_warehouse: Optional[str] = Field(default=None, min_length=1)
    date: Optional[str] = None
    remarks: Optional[str] = None
    status: Optional[TransferStatus] = None

    @model_validator(mode="after")
    def distinct_warehouses(self):
        return _check_distinct_warehouses(self)


# Deliveries

class DeliveryCreate(BaseModel):
    customer: str = Field(min_length=1)
    delivery_id: Optional[str] = None
    total_stops: Optional[int] = Field(default=None, ge=0)
    rider: Optional[str] = None
    date: Optional[str] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None


class DeliveryUpdate(BaseModel):
    customer: Optional[str] = Field(default=None, min_length=1)
    delivery_id: Optional[str] = None
    total_stops: Optional[int] = Field(default=None, ge=0)
    rider: Optional[str] = None
    date: Optional[str] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None


# Manufacturing

class ManufacturingOrderCreate(BaseModel):
    product: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    manufacturing_id: Optional[str] = None
    production_line: Optional[str] = None
    created_on: Optional[str] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None


class ManufacturingOrderUpdate(BaseModel):
    product: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, ge=1)
    manufacturing_id: Optional[str] = None
    production_line: Optional[str] = None
    created_on: Optional[str] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None
