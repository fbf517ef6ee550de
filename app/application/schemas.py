from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.domain.models import OrderStatus, PaymentMethod, PaymentStatus, UserRole

# Row schemas: one per table, validated before every seed insert

class UserRow(BaseModel):
    first_name: str = Field(max_length=80)
    last_name: str = Field(max_length=80)
    email: str = Field(max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    password_hash: str = Field(max_length=255)
    role: UserRole = UserRole.customer

class AddressRow(BaseModel):
    user_id: int
    label: Optional[str] = Field(None, max_length=50)
    street: str
    city: str
    state: Optional[str] = None
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str
    is_default: bool = False

class SupplierRow(BaseModel):
    name: str = Field(max_length=150)
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None

class CategoryRow(BaseModel):
    name: str = Field(max_length=120)
    description: Optional[str] = None
    parent_id: Optional[int] = None

class ProductRow(BaseModel):
    sku: str = Field(max_length=64)
    name: str = Field(max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, decimal_places=2)
    cost_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    supplier_id: Optional[int] = None
    active: bool = True

class ProductCategoryRow(BaseModel):
    product_id: int
    category_id: int

class ProductImageRow(BaseModel):
    product_id: int
    image_url: str = Field(max_length=1024)
    alt_text: Optional[str] = Field(None, max_length=255)
    is_primary: bool = False

class InventoryRow(BaseModel):
    product_id: int
    quantity: int = Field(0, ge=0)
    warehouse_location: Optional[str] = None

class OrderRow(BaseModel):
    user_id: int
    shipping_address_id: int
    billing_address_id: Optional[int] = None
    order_status: OrderStatus = OrderStatus.pending
    subtotal: Decimal = Field(ge=0, decimal_places=2)
    shipping_fee: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    tax: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    total: Decimal = Field(ge=0, decimal_places=2)
    placed_at: Optional[datetime] = None

class OrderItemRow(BaseModel):
    order_id: int
    product_id: int
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0, decimal_places=2)
    discount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)

class PaymentRow(BaseModel):
    order_id: int
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.pending
    amount: Decimal = Field(ge=0, decimal_places=2)
    transaction_reference: Optional[str] = None
    paid_at: Optional[datetime] = None
    payment_date: Optional[datetime] = None

class ReviewRow(BaseModel):
    product_id: int
    user_id: int
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = None
    body: Optional[str] = None
    created_at: Optional[datetime] = None

class PriceHistoryRow(BaseModel):
    product_id: int
    old_price: Decimal = Field(ge=0, decimal_places=2)
    new_price: Decimal = Field(ge=0, decimal_places=2)
    changed_at: Optional[datetime] = None
    changed_by: Optional[int] = None

ROW_SCHEMAS = {
    "users": UserRow,
    "addresses": AddressRow,
    "suppliers": SupplierRow,
    "categories": CategoryRow,
    "products": ProductRow,
    "product_categories": ProductCategoryRow,
    "product_images": ProductImageRow,
    "inventory": InventoryRow,
    "orders": OrderRow,
    "order_items": OrderItemRow,
    "payments": PaymentRow,
    "reviews": ReviewRow,
    "product_price_history": PriceHistoryRow,
}

# Service inputs

class ProductCreate(ProductRow):
    category_ids: list[int] = []
    quantity: int = Field(0, ge=0)
    warehouse_location: Optional[str] = None

class CategoryCreate(CategoryRow):
    pass

class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)
    discount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)

class OrderCreate(BaseModel):
    user_id: int
    shipping_address_id: int
    billing_address_id: Optional[int] = None
    shipping_fee: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    tax: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    items: list[OrderItemCreate] = Field(min_length=1)

    @field_validator("items")
    @classmethod
    def one_line_per_product(cls, items: list[OrderItemCreate]) -> list[OrderItemCreate]:
        product_ids = [i.product_id for i in items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("each product may appear only once per order")
        return items

class PriceChange(BaseModel):
    new_price: Decimal = Field(ge=0, decimal_places=2)
    changed_by: Optional[int] = None
