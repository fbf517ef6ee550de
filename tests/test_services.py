import pytest
from datetime import datetime
from decimal import Decimal
from pydantic import ValidationError
from sqlalchemy import func, select, update

from app.application.schemas import OrderCreate, OrderItemCreate, PriceChange, ProductCreate
from app.application.service import OrderService, ProductService, UserService
from app.domain.models import (
    Address, Inventory, Order, OrderItem, OrderStatus, PriceHistory, Product, ProductCategory, Review,
)
from app.errors import (
    ConstraintViolationError, InsufficientStockError, NotFoundError, RestrictedDeleteError,
)

def stock(db, product_id):
    return db.scalar(select(Inventory.quantity).where(Inventory.product_id == product_id))

def order_count(db):
    return db.scalar(select(func.count()).select_from(Order))

class TestPlaceOrder:
    def test_totals_snapshot_and_stock(self, db):
        order = OrderService(db).place(OrderCreate(
            user_id=6,
            shipping_address_id=6,
            shipping_fee=Decimal("10.00"),
            tax=Decimal("5.00"),
            items=[
                OrderItemCreate(product_id=21, quantity=2),
                OrderItemCreate(product_id=22, quantity=1, discount=Decimal("5.00")),
            ],
        ))

        assert order.order_status == OrderStatus.pending
        assert order.subtotal == Decimal("125.00")
        assert order.total == Decimal("140.00")
        prices = {item.product_id: item.unit_price for item in order.items}
        assert prices == {21: Decimal("25.00"), 22: Decimal("80.00")}
        assert stock(db, 21) == 78
        assert stock(db, 22) == 24
        assert order_count(db) == 6

    def test_insufficient_stock_leaves_nothing_behind(self, db):
        with pytest.raises(InsufficientStockError) as exc:
            OrderService(db).place(OrderCreate(
                user_id=6, shipping_address_id=6,
                items=[OrderItemCreate(product_id=6, quantity=16)],
            ))
        assert exc.value.product_id == 6
        assert stock(db, 6) == 15
        assert order_count(db) == 5

    def test_exact_stock_can_be_taken(self, db):
        OrderService(db).place(OrderCreate(
            user_id=6, shipping_address_id=6,
            items=[OrderItemCreate(product_id=6, quantity=15)],
        ))
        assert stock(db, 6) == 0

    def test_later_line_failure_restores_earlier_stock(self, db):
        with pytest.raises(InsufficientStockError):
            OrderService(db).place(OrderCreate(
                user_id=6, shipping_address_id=6,
                items=[
                    OrderItemCreate(product_id=21, quantity=1),
                    OrderItemCreate(product_id=6, quantity=16),
                ],
            ))
        assert stock(db, 21) == 80
        assert order_count(db) == 5

    def test_address_must_belong_to_user(self, db):
        with pytest.raises(NotFoundError):
            OrderService(db).place(OrderCreate(
                user_id=6, shipping_address_id=1,
                items=[OrderItemCreate(product_id=21, quantity=1)],
            ))
        assert stock(db, 21) == 80

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            OrderService(db).place(OrderCreate(
                user_id=999, shipping_address_id=6,
                items=[OrderItemCreate(product_id=21, quantity=1)],
            ))

    def test_inactive_product_cannot_be_ordered(self, db):
        ProductService(db).deactivate(21)
        with pytest.raises(NotFoundError):
            OrderService(db).place(OrderCreate(
                user_id=6, shipping_address_id=6,
                items=[OrderItemCreate(product_id=21, quantity=1)],
            ))

    def test_discount_larger_than_line(self, db):
        with pytest.raises(ConstraintViolationError):
            OrderService(db).place(OrderCreate(
                user_id=6, shipping_address_id=6,
                items=[OrderItemCreate(product_id=25, quantity=1, discount=Decimal("50.00"))],
            ))
        assert stock(db, 25) == 40

    def test_product_listed_twice_rejected(self):
        with pytest.raises(ValidationError):
            OrderCreate(
                user_id=6, shipping_address_id=6,
                items=[OrderItemCreate(product_id=21, quantity=1), OrderItemCreate(product_id=21, quantity=2)],
            )

    def test_sub_cent_amounts_rejected(self):
        with pytest.raises(ValidationError):
            OrderItemCreate(product_id=21, quantity=1, discount=Decimal("0.005"))
        with pytest.raises(ValidationError):
            PriceChange(new_price=Decimal("9.999"))

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError):
            OrderCreate(user_id=6, shipping_address_id=6, items=[])

    def test_status_update_restamps(self, db):
        db.execute(update(Order).where(Order.order_id == 2).values(updated_at=datetime(2000, 1, 1)))
        db.commit()

        order = OrderService(db).update_status(2, OrderStatus.shipped)

        db.expire_all()
        assert db.get(Order, 2).order_status == OrderStatus.shipped
        assert order.updated_at > datetime(2000, 1, 1)

class TestPriceChanges:
    def test_change_appends_history(self, db):
        product = ProductService(db).change_price(1, PriceChange(new_price=Decimal("9999.00"), changed_by=11))

        assert product.price == Decimal("9999.00")
        latest = db.scalars(
            select(PriceHistory).where(PriceHistory.product_id == 1).order_by(PriceHistory.history_id.desc())
        ).first()
        assert (latest.old_price, latest.new_price, latest.changed_by) == (
            Decimal("10950.00"), Decimal("9999.00"), 11,
        )

    def test_unchanged_price_writes_no_history(self, db):
        before = db.scalar(select(func.count()).select_from(PriceHistory))
        ProductService(db).change_price(1, PriceChange(new_price=Decimal("10950.00")))
        assert db.scalar(select(func.count()).select_from(PriceHistory)) == before

    def test_existing_orders_keep_their_price(self, db):
        ProductService(db).change_price(1, PriceChange(new_price=Decimal("1.00")))
        unit_price = db.scalar(
            select(OrderItem.unit_price).where(OrderItem.order_id == 2, OrderItem.product_id == 1)
        )
        assert unit_price == Decimal("10950.00")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            PriceChange(new_price=Decimal("-1"))

    def test_editor_removal_keeps_history(self, db):
        ProductService(db).change_price(21, PriceChange(new_price=Decimal("27.00"), changed_by=6))
        UserService(db).delete(6)

        rows = db.execute(
            select(PriceHistory.new_price, PriceHistory.changed_by).where(PriceHistory.product_id == 21)
        ).all()
        assert rows == [(Decimal("27.00"), None)]

class TestProducts:
    def test_create_with_category_and_stock(self, db):
        product = ProductService(db).create(ProductCreate(
            sku="SPORT006", name="Skipping Rope", price=Decimal("12.50"),
            category_ids=[5], quantity=40, warehouse_location="Nairobi",
        ))

        assert db.scalar(select(Product.product_id).where(Product.sku == "SPORT006")) == product.product_id
        links = db.scalars(select(ProductCategory.category_id).where(ProductCategory.product_id == product.product_id)).all()
        assert links == [5]
        assert stock(db, product.product_id) == 40

    def test_duplicate_sku(self, db):
        with pytest.raises(ConstraintViolationError) as exc:
            ProductService(db).create(ProductCreate(sku="ELEC001", name="Clone", price=Decimal("1.00")))
        assert exc.value.table == "products"
        assert db.scalar(select(func.count()).select_from(Product)) == 25

    def test_unknown_category(self, db):
        with pytest.raises(NotFoundError):
            ProductService(db).create(ProductCreate(
                sku="NEW001", name="New", price=Decimal("1.00"), category_ids=[99],
            ))

    def test_list_active_only(self, db):
        service = ProductService(db)
        service.deactivate(3)
        assert len(service.list()) == 25
        assert 3 not in [p.product_id for p in service.list(active_only=True)]

    def test_deactivated_product_keeps_its_rows(self, db):
        ProductService(db).deactivate(2)
        assert db.get(Product, 2).active is False
        assert stock(db, 2) == 40

class TestDeletes:
    def test_user_with_orders_is_restricted(self, db):
        with pytest.raises(RestrictedDeleteError) as exc:
            UserService(db).delete(1)
        assert (exc.value.dependent_table, exc.value.column) == ("orders", "user_id")
        assert db.scalar(select(func.count()).select_from(Address).where(Address.user_id == 1)) == 1

    def test_user_without_orders_takes_addresses_and_reviews(self, db):
        UserService(db).delete(6)
        with pytest.raises(NotFoundError):
            UserService(db).get(6)
        assert db.scalar(select(func.count()).select_from(Address).where(Address.user_id == 6)) == 0
        assert db.scalar(select(func.count()).select_from(Review).where(Review.user_id == 6)) == 0

    def test_ordered_product_is_restricted(self, db):
        with pytest.raises(RestrictedDeleteError) as exc:
            ProductService(db).delete(2)
        assert exc.value.dependent_table == "order_items"
        assert ProductService(db).get(2).sku == "ELEC002"

    def test_unordered_product_cascades(self, db):
        ProductService(db).delete(3)
        assert db.get(Product, 3) is None
        assert stock(db, 3) is None
        assert db.scalar(select(func.count()).select_from(PriceHistory).where(PriceHistory.product_id == 3)) == 0
        assert db.scalar(select(func.count()).select_from(Review).where(Review.product_id == 3)) == 0

    def test_missing_row(self, db):
        with pytest.raises(NotFoundError):
            ProductService(db).delete(999)
