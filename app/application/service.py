from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import Any, Optional

from app.application.category_tree import CategoryTree
from app.application.deletion import delete_row
from app.application.schemas import CategoryCreate, OrderCreate, PriceChange, ProductCreate, ProductRow
from app.domain.models import (
    Address, Category, Inventory, Order, OrderItem, OrderStatus, PriceHistory, Product, User, utcnow,
)
from app.errors import (
    CategoryCycleError, ConstraintViolationError, InsufficientStockError, NotFoundError,
)
from shared.core import get_logger

logger = get_logger(__name__)


def _commit(db: Session, table: str, values: Optional[dict[str, Any]] = None) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolationError(table, None, values or {}, str(exc.orig)) from exc
    except Exception:
        db.rollback()
        raise


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def delete(self, user_id: int) -> None:
        """Blocked while the user has orders; addresses and reviews go with the user."""
        delete_row(self.db, User, user_id)
        _commit(self.db, "users")


class CategoryService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, category_id: int) -> Category:
        category = self.db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def create(self, data: CategoryCreate) -> Category:
        if data.parent_id is not None:
            self.get(data.parent_id)
        values = data.model_dump()
        category = Category(**values)
        self.db.add(category)
        _commit(self.db, "categories", values)
        return category

    def tree(self) -> CategoryTree:
        return CategoryTree.from_session(self.db)

    def set_parent(self, category_id: int, parent_id: Optional[int]) -> Category:
        category = self.get(category_id)
        if self.tree().would_create_cycle(category_id, parent_id):
            raise CategoryCycleError(f"Category {parent_id} is {category_id} or one of its descendants")
        category.parent_id = parent_id
        _commit(self.db, "categories", {"category_id": category_id, "parent_id": parent_id})
        return category

    def delete(self, category_id: int) -> None:
        """Children keep existing with no parent; product links are removed."""
        delete_row(self.db, Category, category_id)
        _commit(self.db, "categories")


class ProductService:
    def __init__(self, db: Session):
        self.db = db

    def list(self, active_only: bool = False):
        stmt = select(Product).order_by(Product.product_id)
        if active_only:
            stmt = stmt.where(Product.active.is_(True))
        return self.db.scalars(stmt).all()

    def get(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def create(self, data: ProductCreate) -> Product:
        """Create a product with its category links and its inventory row."""
        values = data.model_dump(include=set(ProductRow.model_fields))
        product = Product(**values)
        for category_id in data.category_ids:
            category = self.db.get(Category, category_id)
            if category is None:
                raise NotFoundError("Category", category_id)
            product.categories.append(category)
        product.inventory = Inventory(quantity=data.quantity, warehouse_location=data.warehouse_location)
        self.db.add(product)
        _commit(self.db, "products", values)
        return product

    def change_price(self, product_id: int, change: PriceChange) -> Product:
        """Update the price and append the matching history row in one commit."""
        product = self.get(product_id)
        old_price = product.price
        if old_price == change.new_price:
            return product
        product.price = change.new_price
        self.db.add(PriceHistory(
            product_id=product.product_id,
            old_price=old_price,
            new_price=change.new_price,
            changed_by=change.changed_by,
        ))
        _commit(self.db, "product_price_history", change.model_dump())
        logger.info(
            f"Price of product {product_id} changed",
            extra={'extra_fields': {'old_price': old_price, 'new_price': change.new_price, 'changed_by': change.changed_by}}
        )
        return product

    def deactivate(self, product_id: int) -> Product:
        product = self.get(product_id)
        product.active = False
        _commit(self.db, "products")
        return product

    def delete(self, product_id: int) -> None:
        """Refused once the product appears on any order."""
        delete_row(self.db, Product, product_id)
        _commit(self.db, "products")


class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, order_id: int) -> Order:
        order = self.db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def _address_for(self, user_id: int, address_id: int) -> Address:
        address = self.db.get(Address, address_id)
        if address is None or address.user_id != user_id:
            raise NotFoundError("Address", address_id)
        return address

    def _reserve_stock(self, product_id: int, quantity: int) -> None:
        # Conditional decrement: never lets quantity go below zero
        result = self.db.execute(
            update(Inventory)
            .where(Inventory.product_id == product_id, Inventory.quantity >= quantity)
            .values(quantity=Inventory.quantity - quantity, last_updated=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount != 1:
            raise InsufficientStockError(product_id, quantity)

    def place(self, data: OrderCreate) -> Order:
        """Create the order and its items, and take the stock, atomically.

        Each item's unit_price is the product's price at this moment.
        """
        try:
            user = self.db.get(User, data.user_id)
            if user is None:
                raise NotFoundError("User", data.user_id)
            shipping = self._address_for(user.user_id, data.shipping_address_id)
            billing = None
            if data.billing_address_id is not None:
                billing = self._address_for(user.user_id, data.billing_address_id)

            order = Order(
                user_id=user.user_id,
                shipping_address_id=shipping.address_id,
                billing_address_id=billing.address_id if billing else None,
                order_status=OrderStatus.pending,
                shipping_fee=data.shipping_fee,
                tax=data.tax,
            )
            subtotal = Decimal("0")
            for line in data.items:
                product = self.db.get(Product, line.product_id)
                if product is None or not product.active:
                    raise NotFoundError("Product", line.product_id)
                line_total = product.price * line.quantity - line.discount
                if line_total < 0:
                    raise ConstraintViolationError(
                        "order_items", None, line.model_dump(), "discount exceeds the line total"
                    )
                self._reserve_stock(product.product_id, line.quantity)
                order.items.append(OrderItem(
                    product_id=product.product_id,
                    quantity=line.quantity,
                    unit_price=product.price,
                    discount=line.discount,
                ))
                subtotal += line_total

            order.subtotal = subtotal
            order.total = subtotal + data.shipping_fee + data.tax
            self.db.add(order)
        except Exception:
            self.db.rollback()
            raise
        _commit(self.db, "orders", data.model_dump(exclude={"items"}))
        logger.info(
            f"Order {order.order_id} placed",
            extra={'extra_fields': {'user_id': order.user_id, 'items': len(order.items), 'total': order.total}}
        )
        return order

    def update_status(self, order_id: int, status: OrderStatus) -> Order:
        order = self.get(order_id)
        order.order_status = status
        _commit(self.db, "orders", {"order_id": order_id, "order_status": status})
        return order
