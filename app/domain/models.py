from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, Session, attributes
from sqlalchemy import (
    String, Text, Integer, BigInteger, SmallInteger, Boolean, Numeric, DateTime,
    ForeignKey, CheckConstraint, UniqueConstraint, Index, MetaData,
    Enum as SQLEnum, event, func, true, false,
)
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import enum

from app.errors import ImmutableFieldError

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# SQLite only auto-assigns INTEGER PRIMARY KEY columns
BigId = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class UserRole(str, enum.Enum):
    customer = "customer"
    admin = "admin"


class OrderStatus(str, enum.Enum):
    pending = "pending"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"
    returned = "returned"


class PaymentMethod(str, enum.Enum):
    card = "card"
    mpesa = "mpesa"
    paypal = "paypal"
    bank_transfer = "bank_transfer"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


def _enum(enum_cls: type[enum.Enum], name: str) -> SQLEnum:
    return SQLEnum(enum_cls, name=name, create_constraint=True, validate_strings=True)


class User(Base):
    __tablename__ = "users"
    __stamp_on_update__ = "updated_at"
    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(80))
    last_name: Mapped[str] = mapped_column(String(80))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30))
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[UserRole] = mapped_column(
        _enum(UserRole, "user_role"), default=UserRole.customer, server_default=UserRole.customer.value
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    addresses: Mapped[list["Address"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    # RESTRICT: leave dependents alone so the database can refuse the delete
    orders: Mapped[list["Order"]] = relationship(back_populates="user", passive_deletes="all")
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


class Address(Base):
    __tablename__ = "addresses"
    address_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"))
    label: Mapped[Optional[str]] = mapped_column(String(50))
    street: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(100))
    state: Mapped[Optional[str]] = mapped_column(String(100))
    postal_code: Mapped[Optional[str]] = mapped_column(String(20))
    country: Mapped[str] = mapped_column(String(100))
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    user: Mapped[User] = relationship(back_populates="addresses")


class Supplier(Base):
    __tablename__ = "suppliers"
    supplier_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(150))
    contact_email: Mapped[Optional[str]] = mapped_column(String(255))
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50))
    address: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    products: Mapped[list["Product"]] = relationship(back_populates="supplier", passive_deletes=True)


class Category(Base):
    __tablename__ = "categories"
    category_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.category_id", ondelete="SET NULL"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    parent: Mapped[Optional["Category"]] = relationship(remote_side=[category_id], back_populates="children")
    children: Mapped[list["Category"]] = relationship(back_populates="parent", passive_deletes=True)
    products: Mapped[list["Product"]] = relationship(
        secondary="product_categories", back_populates="categories", passive_deletes=True
    )


class Product(Base):
    __tablename__ = "products"
    __stamp_on_update__ = "updated_at"
    __table_args__ = (
        CheckConstraint("price >= 0", name="price_nonnegative"),
        CheckConstraint("cost_price IS NULL OR cost_price >= 0", name="cost_price_nonnegative"),
        Index("idx_products_name", "name"),
    )
    product_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str] = mapped_column(String(64), unique=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    cost_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    supplier_id: Mapped[Optional[int]] = mapped_column(ForeignKey("suppliers.supplier_id", ondelete="SET NULL"))
    active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    supplier: Mapped[Optional[Supplier]] = relationship(back_populates="products")
    categories: Mapped[list[Category]] = relationship(
        secondary="product_categories", back_populates="products", passive_deletes=True
    )
    images: Mapped[list["ProductImage"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    inventory: Mapped[Optional["Inventory"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    order_items: Mapped[list["OrderItem"]] = relationship(back_populates="product", passive_deletes="all")
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    price_history: Mapped[list["PriceHistory"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True,
        order_by="PriceHistory.history_id",
    )


class ProductCategory(Base):
    __tablename__ = "product_categories"
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.product_id", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.category_id", ondelete="CASCADE"), primary_key=True
    )


class ProductImage(Base):
    __tablename__ = "product_images"
    image_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.product_id", ondelete="CASCADE"))
    image_url: Mapped[str] = mapped_column(String(1024))
    alt_text: Mapped[Optional[str]] = mapped_column(String(255))
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    product: Mapped[Product] = relationship(back_populates="images")


class Inventory(Base):
    __tablename__ = "inventory"
    __stamp_on_update__ = "last_updated"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_nonnegative"),
        Index("idx_inventory_product", "product_id"),
    )
    inventory_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.product_id", ondelete="CASCADE"), unique=True
    )
    quantity: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    warehouse_location: Mapped[Optional[str]] = mapped_column(String(255))
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    product: Mapped[Product] = relationship(back_populates="inventory")


class Order(Base):
    __tablename__ = "orders"
    __stamp_on_update__ = "updated_at"
    __table_args__ = (
        CheckConstraint("subtotal >= 0", name="subtotal_nonnegative"),
        CheckConstraint("shipping_fee >= 0", name="shipping_fee_nonnegative"),
        CheckConstraint("tax >= 0", name="tax_nonnegative"),
        CheckConstraint("total >= 0", name="total_nonnegative"),
        Index("idx_orders_user", "user_id"),
    )
    order_id: Mapped[int] = mapped_column(BigId, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="RESTRICT"))
    shipping_address_id: Mapped[int] = mapped_column(ForeignKey("addresses.address_id", ondelete="RESTRICT"))
    billing_address_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("addresses.address_id", ondelete="SET NULL")
    )
    order_status: Mapped[OrderStatus] = mapped_column(
        _enum(OrderStatus, "order_status"), default=OrderStatus.pending, server_default=OrderStatus.pending.value
    )
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    shipping_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), server_default="0")
    tax: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), server_default="0")
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    placed_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    user: Mapped[User] = relationship(back_populates="orders")
    shipping_address: Mapped[Address] = relationship(foreign_keys=[shipping_address_id])
    billing_address: Mapped[Optional[Address]] = relationship(foreign_keys=[billing_address_id])
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order", cascade="all, delete-orphan", passive_deletes=True
    )
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="order", cascade="all, delete-orphan", passive_deletes=True
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity_positive"),
        CheckConstraint("unit_price >= 0", name="unit_price_nonnegative"),
        CheckConstraint("discount >= 0", name="discount_nonnegative"),
        Index("idx_order_items_product", "product_id"),
    )
    order_id: Mapped[int] = mapped_column(
        BigId, ForeignKey("orders.order_id", ondelete="CASCADE"), primary_key=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.product_id", ondelete="RESTRICT"), primary_key=True
    )
    quantity: Mapped[int] = mapped_column(Integer)
    # Price at the time of the order
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    discount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), server_default="0")
    order: Mapped[Order] = relationship(back_populates="items")
    product: Mapped[Product] = relationship(back_populates="order_items")


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="amount_nonnegative"),
    )
    payment_id: Mapped[int] = mapped_column(BigId, primary_key=True)
    order_id: Mapped[int] = mapped_column(BigId, ForeignKey("orders.order_id", ondelete="CASCADE"))
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    payment_method: Mapped[PaymentMethod] = mapped_column(_enum(PaymentMethod, "payment_method"))
    status: Mapped[PaymentStatus] = mapped_column(
        _enum(PaymentStatus, "payment_status"), default=PaymentStatus.pending, server_default=PaymentStatus.pending.value
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    transaction_reference: Mapped[Optional[str]] = mapped_column(String(255), unique=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    order: Mapped[Order] = relationship(back_populates="payments")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="rating_range"),
        # One review per user per product
        UniqueConstraint("product_id", "user_id"),
    )
    review_id: Mapped[int] = mapped_column(BigId, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.product_id", ondelete="CASCADE"))
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"))
    rating: Mapped[int] = mapped_column(SmallInteger)
    title: Mapped[Optional[str]] = mapped_column(String(255))
    body: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    product: Mapped[Product] = relationship(back_populates="reviews")
    user: Mapped[User] = relationship(back_populates="reviews")


class PriceHistory(Base):
    __tablename__ = "product_price_history"
    history_id: Mapped[int] = mapped_column(BigId, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.product_id", ondelete="CASCADE"))
    old_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    new_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    changed_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    # User or admin who changed the price
    changed_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.user_id", ondelete="SET NULL"))
    product: Mapped[Product] = relationship(back_populates="price_history")
    editor: Mapped[Optional[User]] = relationship()


@event.listens_for(Session, "before_flush")
def stamp_updates(session: Session, flush_context, instances) -> None:
    """Re-stamp modification times and refuse writes to write-once data."""
    now = utcnow()
    for obj in session.dirty:
        if not session.is_modified(obj, include_collections=False):
            continue
        if isinstance(obj, PriceHistory):
            raise ImmutableFieldError("product_price_history rows are append-only")
        if isinstance(obj, OrderItem) and attributes.get_history(obj, "unit_price").has_changes():
            raise ImmutableFieldError("order_items.unit_price is fixed when the order is placed")
        column = getattr(type(obj), "__stamp_on_update__", None)
        if column:
            setattr(obj, column, now)

    deleted_products = {obj.product_id for obj in session.deleted if isinstance(obj, Product)}
    for obj in session.deleted:
        if isinstance(obj, PriceHistory) and obj.product_id not in deleted_products:
            raise ImmutableFieldError("product_price_history rows are only removed with their product")
