import pytest
from datetime import datetime
from decimal import Decimal
from sqlalchemy import select, update

from app.domain.models import Inventory, OrderItem, PriceHistory, Product, User
from app.errors import ImmutableFieldError

OLD = datetime(2000, 1, 1)

@pytest.fixture
def backdated(db):
    for model in (User, Product):
        db.execute(update(model).values(updated_at=OLD))
    db.execute(update(Inventory).values(last_updated=OLD))
    db.commit()
    return db

def test_user_update_restamps(backdated):
    user = backdated.get(User, 1)
    created = user.created_at
    user.phone = "0700000000"
    backdated.commit()
    assert user.updated_at > OLD
    assert user.created_at == created

def test_untouched_rows_keep_their_stamp(backdated):
    backdated.get(User, 1).phone = "0700000000"
    backdated.commit()
    assert backdated.get(User, 2).updated_at == OLD

def test_product_update_restamps(backdated):
    product = backdated.get(Product, 4)
    product.description = "Refurbished"
    backdated.commit()
    assert product.updated_at > OLD

def test_inventory_update_restamps(backdated):
    row = backdated.scalars(select(Inventory).where(Inventory.product_id == 4)).one()
    row.quantity = 26
    backdated.commit()
    assert row.last_updated > OLD

def test_unit_price_is_write_once(db):
    item = db.get(OrderItem, (1, 2))
    item.unit_price = Decimal("1.00")
    with pytest.raises(ImmutableFieldError):
        db.flush()
    db.rollback()
    assert db.get(OrderItem, (1, 2)).unit_price == Decimal("111200.00")

def test_other_order_item_fields_can_change(db):
    item = db.get(OrderItem, (1, 2))
    item.discount = Decimal("10.00")
    db.commit()
    assert item.discount == Decimal("10.00")

def test_price_history_cannot_be_edited(db):
    row = db.scalars(select(PriceHistory).where(PriceHistory.product_id == 1)).first()
    row.new_price = Decimal("1.00")
    with pytest.raises(ImmutableFieldError):
        db.flush()
    db.rollback()

def test_price_history_cannot_be_deleted_alone(db):
    row = db.scalars(select(PriceHistory).where(PriceHistory.product_id == 1)).first()
    db.delete(row)
    with pytest.raises(ImmutableFieldError):
        db.flush()
    db.rollback()

def test_price_history_goes_with_its_product(db):
    product = db.get(Product, 3)
    assert len(product.price_history) == 1
    db.delete(product)
    db.commit()
    assert db.scalars(select(PriceHistory).where(PriceHistory.product_id == 3)).all() == []
