"""
Pydantic schemas for the back-office entity endpoints.
Centralized so services and routers share them without circular imports.

Create schemas carry required fields, Update schemas make every field
optional (only the fields sent are applied), Output schemas are built
from ORM objects and expand related entities.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field

from shared.utils.schemas import ActorSummary


# =============================================================================
# User Schemas
# =============================================================================


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: str = "STAFF"
    status: str = "active"


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: str | None = None
    status: str | None = None


# =============================================================================
# Invitation Schemas
# =============================================================================


class InvitationCreate(BaseModel):
    email: EmailStr
    role: str = "STAFF"


class InvitationOutput(BaseModel):
    id: int
    company_id: int
    email: str
    role: str
    status: str
    token: str
    expires_at: datetime
    accepted_at: datetime | None = None
    created_at: datetime
    created_by_id: int | None = None
    invitation_link: str | None = None

    class Config:
        from_attributes = True


class InvitationPreview(BaseModel):
    """Public view of an invitation, shown before accepting it."""

    email: str
    role: str
    status: str
    company_name: str
    expires_at: datetime


# =============================================================================
# Room Type Schemas
# =============================================================================


class RoomSummary(BaseModel):
    id: int
    room_number: str
    name: str | None = None
    floor: int | None = None
    status: str

    class Config:
        from_attributes = True


class RoomTypeSummary(BaseModel):
    id: int
    name: str
    base_price: Decimal
    max_occupancy: int

    class Config:
        from_attributes = True


class RoomTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    base_price: Decimal = Field(ge=0)
    max_occupancy: int = Field(ge=1)
    bed_type: str | None = Field(default=None, max_length=50)
    size: Decimal | None = Field(default=None, ge=0)
    amenities: list[str] | None = None
    images: list[str] | None = None


class RoomTypeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    base_price: Decimal | None = Field(default=None, ge=0)
    max_occupancy: int | None = Field(default=None, ge=1)
    bed_type: str | None = Field(default=None, max_length=50)
    size: Decimal | None = Field(default=None, ge=0)
    amenities: list[str] | None = None
    images: list[str] | None = None


class RoomTypeOutput(BaseModel):
    id: int
    company_id: int
    name: str
    description: str | None = None
    base_price: Decimal
    max_occupancy: int
    bed_type: str | None = None
    size: Decimal | None = None
    amenities: list[str] | None = None
    images: list[str] | None = None
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None
    creator: ActorSummary | None = None
    updater: ActorSummary | None = None
    # Only non-deleted rooms
    rooms: list[RoomSummary] = Field(default_factory=list, validation_alias="active_rooms")

    class Config:
        from_attributes = True


# =============================================================================
# Room Schemas
# =============================================================================


class RoomCreate(BaseModel):
    room_number: str = Field(min_length=1, max_length=20)
    name: str | None = Field(default=None, max_length=100)
    floor: int | None = None
    room_type_id: int
    status: str | None = None
    description: str | None = None


class RoomUpdate(BaseModel):
    room_number: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, max_length=100)
    floor: int | None = None
    room_type_id: int | None = None
    status: str | None = None
    description: str | None = None


class RoomStatusUpdate(BaseModel):
    status: str


class RoomOutput(BaseModel):
    id: int
    company_id: int
    room_number: str
    name: str | None = None
    floor: int | None = None
    room_type_id: int
    status: str
    description: str | None = None
    room_type: RoomTypeSummary
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Client Schemas
# =============================================================================


class ClientSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    customer_type: str

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    id_number: str | None = Field(default=None, max_length=50)
    customer_type: str | None = None
    has_account: bool = False
    credit_limit: Decimal = Field(default=Decimal("0"), ge=0)
    sponsor_company_id: int | None = None
    employee_id: str | None = Field(default=None, max_length=50)
    department: str | None = Field(default=None, max_length=100)


class ClientUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    id_number: str | None = Field(default=None, max_length=50)
    customer_type: str | None = None
    has_account: bool | None = None
    credit_limit: Decimal | None = Field(default=None, ge=0)
    sponsor_company_id: int | None = None
    employee_id: str | None = Field(default=None, max_length=50)
    department: str | None = Field(default=None, max_length=100)


class ClientOutput(BaseModel):
    id: int
    company_id: int
    first_name: str
    last_name: str
    full_name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    id_number: str | None = None
    customer_type: str
    has_account: bool
    credit_limit: Decimal
    current_balance: Decimal
    available_credit: Decimal
    sponsor_company_id: int | None = None
    sponsor_company: ClientSummary | None = None
    employee_id: str | None = None
    department: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None

    class Config:
        from_attributes = True


class ClientBalance(BaseModel):
    client_id: int
    full_name: str
    has_account: bool
    credit_limit: Decimal
    current_balance: Decimal
    available_credit: Decimal


# =============================================================================
# Stay Schemas
# =============================================================================


class StayCreate(BaseModel):
    room_id: int
    client_id: int
    check_in_date: date
    check_out_date: date
    adults: int = Field(default=1, ge=1)
    children: int = Field(default=0, ge=0)
    total_amount: Decimal | None = Field(default=None, ge=0)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str | None = Field(default=None, max_length=500)


class StayUpdate(BaseModel):
    room_id: int | None = None
    client_id: int | None = None
    check_in_date: date | None = None
    check_out_date: date | None = None
    adults: int | None = Field(default=None, ge=1)
    children: int | None = Field(default=None, ge=0)
    total_amount: Decimal | None = Field(default=None, ge=0)
    paid_amount: Decimal | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=500)


class StayCheckIn(BaseModel):
    actual_check_in: datetime | None = None


class StayCheckOut(BaseModel):
    actual_check_out: datetime | None = None


class StayOutput(BaseModel):
    id: int
    company_id: int
    room_id: int
    client_id: int
    check_in_date: date
    check_out_date: date
    nights: int
    actual_check_in: datetime | None = None
    actual_check_out: datetime | None = None
    status: str
    adults: int
    children: int
    total_amount: Decimal | None = None
    paid_amount: Decimal
    notes: str | None = None
    room: RoomSummary
    client: ClientSummary
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Category Schemas
# =============================================================================


class CategorySummary(BaseModel):
    id: int
    name: str
    category_type: str

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category_type: str
    type: str | None = Field(default=None, max_length=50)
    description: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    category_type: str | None = None
    type: str | None = Field(default=None, max_length=50)
    description: str | None = None


class CategoryOutput(BaseModel):
    id: int
    company_id: int
    name: str
    category_type: str
    type: str | None = None
    description: str | None = None
    product_count: int = 0
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Product Schemas
# =============================================================================


class ProductSummary(BaseModel):
    id: int
    name: str
    price: Decimal
    stock: int

    class Config:
        from_attributes = True


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category_id: int
    price: Decimal = Field(ge=0)
    unit: str | None = Field(default=None, max_length=30)
    description: str | None = None
    barcode: str | None = Field(default=None, max_length=64)
    stock: int = Field(default=0, ge=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    category_id: int | None = None
    price: Decimal | None = Field(default=None, ge=0)
    unit: str | None = Field(default=None, max_length=30)
    description: str | None = None
    barcode: str | None = Field(default=None, max_length=64)
    stock: int | None = Field(default=None, ge=0)


class StockAdjustment(BaseModel):
    """Relative stock change; negative values take stock out."""

    delta: int
    reason: str | None = Field(default=None, max_length=200)


class ProductOutput(BaseModel):
    id: int
    company_id: int
    name: str
    category_id: int
    category: CategorySummary
    price: Decimal
    unit: str | None = None
    description: str | None = None
    barcode: str | None = None
    stock: int
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Restaurant Table Schemas
# =============================================================================


class OrderSummary(BaseModel):
    id: int
    status: str
    payment_status: str
    total: Decimal

    class Config:
        from_attributes = True


class TableCreate(BaseModel):
    table_number: str = Field(min_length=1, max_length=20)
    capacity: int = Field(ge=1)
    location: str | None = Field(default=None, max_length=100)
    description: str | None = None
    status: str | None = None


class TableUpdate(BaseModel):
    table_number: str | None = Field(default=None, min_length=1, max_length=20)
    capacity: int | None = Field(default=None, ge=1)
    location: str | None = Field(default=None, max_length=100)
    description: str | None = None
    status: str | None = None


class TableAssign(BaseModel):
    order_id: int


class TableOutput(BaseModel):
    id: int
    company_id: int
    table_number: str
    capacity: int
    location: str | None = None
    description: str | None = None
    status: str
    current_order_id: int | None = None
    current_order: OrderSummary | None = None
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Restaurant Order Schemas
# =============================================================================


class OrderItemInput(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)


class OrderCreate(BaseModel):
    client_id: int
    stay_id: int | None = None
    table_number: str | None = Field(default=None, max_length=20)
    service_mode: str | None = None
    notes: str | None = Field(default=None, max_length=500)
    items: list[OrderItemInput] = Field(min_length=1)


class OrderUpdate(BaseModel):
    stay_id: int | None = None
    table_number: str | None = Field(default=None, max_length=20)
    service_mode: str | None = None
    status: str | None = None
    notes: str | None = Field(default=None, max_length=500)


class OrderItemsAdd(BaseModel):
    items: list[OrderItemInput] = Field(min_length=1)


class PaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    payment_method: str
    reference: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=500)


class OrderItemOutput(BaseModel):
    id: int
    product_id: int
    product: ProductSummary
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    class Config:
        from_attributes = True


class PaymentOutput(BaseModel):
    id: int
    order_id: int
    amount: Decimal
    payment_method: str
    reference: str | None = None
    notes: str | None = None
    created_at: datetime
    created_by_id: int | None = None

    class Config:
        from_attributes = True


class OutletOrderOutput(BaseModel):
    id: int
    company_id: int
    client_id: int
    client: ClientSummary
    stay_id: int | None = None
    service_mode: str
    status: str
    payment_status: str
    total: Decimal
    paid_amount: Decimal
    balance: Decimal
    notes: str | None = None
    order_date: datetime
    items: list[OrderItemOutput] = Field(default_factory=list, validation_alias="active_items")
    created_at: datetime
    updated_at: datetime | None = None
    created_by_id: int | None = None
    updated_by_id: int | None = None

    class Config:
        from_attributes = True


class OrderOutput(OutletOrderOutput):
    table_number: str | None = None
    payments: list[PaymentOutput] = Field(
        default_factory=list, validation_alias="active_payments"
    )


# =============================================================================
# Supermarket Order Schemas
# =============================================================================


class SupermarketOrderCreate(BaseModel):
    client_id: int
    stay_id: int | None = None
    service_mode: str | None = None
    order_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=500)
    items: list[OrderItemInput] = Field(min_length=1)


class SupermarketOrderUpdate(BaseModel):
    status: str | None = None
    payment_status: str | None = None
    service_mode: str | None = None
    notes: str | None = Field(default=None, max_length=500)


class OrderItemQuantity(BaseModel):
    quantity: int = Field(ge=1)


# =============================================================================
# Restore Schemas
# =============================================================================


class RestoreOutput(BaseModel):
    success: bool
    message: str
    entity_type: str
    entity_id: int
