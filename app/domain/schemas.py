# app/domain/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from app.domain.enums import OrderStatus, PaymentMethod, UserType

BRAZILIAN_STATES = frozenset({
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA", "MT", "MS", "MG", "PA",
    "PB", "PR", "PE", "PI", "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
})


def _as_str(value: Any) -> Any:
    # ids leave the service as strings, whatever the column type
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _digits_only(value: Any) -> Any:
    if isinstance(value, str):
        return re.sub(r"\D", "", value)
    return value


def _check_password(value: str) -> str:
    if not re.search(r"[a-z]", value):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", value):
        raise ValueError("Password must contain at least one digit")
    return value


def _known_state(value: str) -> str:
    if value not in BRAZILIAN_STATES:
        raise ValueError("Enter a valid state code (e.g. MG, SP, RJ)")
    return value


# integer primary keys are 32-bit, money columns are Numeric(10, 2)
MAX_ID = 2**31 - 1
MAX_QUANTITY = 1000
MAX_AMOUNT = Decimal("99999999.99")

WireId = Annotated[str, BeforeValidator(_as_str)]
EntityId = Annotated[int, Field(gt=0, le=MAX_ID)]

Phone = Annotated[str, StringConstraints(pattern=r"^[1-9][0-9]{9,10}$"), BeforeValidator(_digits_only)]
PersonName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=4, max_length=100, pattern=r"^[a-zA-ZÀ-ÿ\s]+$"),
]
Password = Annotated[
    str,
    StringConstraints(min_length=6, max_length=72),
    AfterValidator(_check_password),
]

Street = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=5, max_length=200, pattern=r"^[a-zA-ZÀ-ÿ0-9\s\-.,()]+$"),
]
StreetNumber = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=2, max_length=10, pattern=r"^[0-9a-zA-Z\-/]+$"),
]
PlaceName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=2, max_length=100, pattern=r"^[a-zA-ZÀ-ÿ\s\-]+$"),
]
District = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=100, pattern=r"^[a-zA-ZÀ-ÿ\s\-]+$"),
]
StateCode = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_upper=True, pattern=r"^[A-Za-z]{2}$"),
    AfterValidator(_known_state),
]
ZipCode = Annotated[str, StringConstraints(pattern=r"^[0-9]{8}$"), BeforeValidator(_digits_only)]

Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)]
Price = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =====================================================
# ORDERS
# =====================================================
class OrderItemIn(ApiModel):
    """Single order line as sent by the client."""

    item_id: EntityId = Field(..., description="Menu item id")
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY, description="Positive integer quantity")


class OrderCreate(ApiModel):
    """Payload for placing an order."""

    payment_method: PaymentMethod
    address_id: EntityId | None = Field(None, description="Delivery address; defaults to the one on file")
    items: List[OrderItemIn] = Field(..., min_length=1, description="At least one line")

    @field_validator("items")
    @classmethod
    def _unique_items(cls, items: List[OrderItemIn]) -> List[OrderItemIn]:
        seen = set()
        for line in items:
            if line.item_id in seen:
                raise ValueError(f"Item {line.item_id} appears more than once; merge the quantities")
            seen.add(line.item_id)
        return items


class OrderStatusUpdate(ApiModel):
    status: OrderStatus


class OrderLineOut(ApiModel):
    item_id: WireId
    description: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderClientOut(ApiModel):
    id: WireId
    nome: str
    phone: str


class MyOrderOut(ApiModel):
    """Order as seen by its own client (no client block)."""

    id: WireId
    address_id: WireId | None = None
    payment_method: PaymentMethod
    status: OrderStatus
    total: Decimal
    created_at: datetime
    updated_at: datetime
    items: List[OrderLineOut]


class OrderOut(MyOrderOut):
    client_id: WireId
    created_by_id: WireId
    client: OrderClientOut | None = None


# =====================================================
# USERS / AUTH
# =====================================================
class UserCreate(ApiModel):
    """Public sign-up. Accounts are always created as CLIENT."""

    nome: PersonName
    phone: Phone
    password: Password


class LoginIn(ApiModel):
    phone: Phone
    password: str = Field(..., min_length=6)


class UserOut(ApiModel):
    id: WireId
    nome: str
    phone: str
    type: UserType
    created_at: datetime


class LoginOut(ApiModel):
    token: str
    user: UserOut


class UserUpdate(ApiModel):
    nome: PersonName | None = None
    phone: Phone | None = None


class ChangePasswordIn(ApiModel):
    current_password: str = Field(..., min_length=1)
    new_password: Password
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserTypeUpdate(ApiModel):
    type: UserType


# =====================================================
# ADDRESS
# =====================================================
class AddressIn(ApiModel):
    street: Street
    number: StreetNumber
    district: District
    city: PlaceName
    state: StateCode
    zip_code: ZipCode


class AddressUpdate(ApiModel):
    street: Street | None = None
    number: StreetNumber | None = None
    district: District | None = None
    city: PlaceName | None = None
    state: StateCode | None = None
    zip_code: ZipCode | None = None


class AddressOut(ApiModel):
    id: WireId
    user_id: WireId
    street: str
    number: str
    district: str
    city: str
    state: str
    zip_code: str


class UserProfileOut(UserOut):
    address: AddressOut | None = None


# =====================================================
# CATALOG
# =====================================================
class CategoryIn(ApiModel):
    description: Description


class CategoryOut(ApiModel):
    id: WireId
    description: str
    item_count: int = 0


class CategoryRef(ApiModel):
    id: WireId
    description: str


class ItemIn(ApiModel):
    description: Description
    unit_price: Price
    category_id: EntityId


class ItemUpdate(ApiModel):
    description: Description | None = None
    unit_price: Price | None = None
    category_id: EntityId | None = None


class ItemOut(ApiModel):
    id: WireId
    description: str
    unit_price: Decimal
    category_id: WireId
    category: CategoryRef | None = None
