"""ON DELETE rules applied by ``delete_row`` rather than by the database."""
import pytest
from decimal import Decimal
from sqlalchemy import event, func, select, text

from app.application.deletion import delete_row
from app.application.loader import SeedLoader
from app.application.schemas import CategoryCreate, PriceChange
from app.application.service import CategoryService, ProductService, UserService
from app.domain.models import (
    Address, Category, Inventory, PriceHistory, Product, ProductCategory, ProductImage, Review, Supplier,
)
from app.errors import RestrictedDeleteError
from app.infrastructure.db import SessionLocal, create_db_engine
from app.infrastructure.schema import create_schema

def _foreign_keys_off(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=OFF")
    cursor.close()

@pytest.fixture
def unenforced_db(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'unenforced.db'}", echo=False)
    # Runs after the engine's own connect hook
    event.listen(engine, "connect", _foreign_keys_off)
    create_schema(engine)
    SeedLoader(engine).load()
    session = SessionLocal(bind=engine)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()

def count(db, model, *where):
    return db.scalar(select(func.count()).select_from(model).where(*where))

class TestWithoutDatabaseEnforcement:
    def test_database_does_not_enforce(self, unenforced_db):
        assert unenforced_db.execute(text("PRAGMA foreign_keys")).scalar() == 0

    def test_user_delete_cascades(self, unenforced_db):
        UserService(unenforced_db).delete(6)
        assert count(unenforced_db, Address, Address.user_id == 6) == 0
        assert count(unenforced_db, Review, Review.user_id == 6) == 0

    def test_user_with_orders_restricted(self, unenforced_db):
        with pytest.raises(RestrictedDeleteError):
            UserService(unenforced_db).delete(1)
        assert count(unenforced_db, Address, Address.user_id == 1) == 1

    def test_editor_delete_nulls_history(self, unenforced_db):
        ProductService(unenforced_db).change_price(21, PriceChange(new_price=Decimal("27.00"), changed_by=6))
        UserService(unenforced_db).delete(6)
        editors = unenforced_db.scalars(
            select(PriceHistory.changed_by).where(PriceHistory.product_id == 21)
        ).all()
        assert editors == [None]

    def test_product_delete_cascades(self, unenforced_db):
        ProductService(unenforced_db).delete(3)
        db = unenforced_db
        assert count(db, Inventory, Inventory.product_id == 3) == 0
        assert count(db, ProductCategory, ProductCategory.product_id == 3) == 0
        assert count(db, ProductImage, ProductImage.product_id == 3) == 0
        assert count(db, Review, Review.product_id == 3) == 0
        assert count(db, PriceHistory, PriceHistory.product_id == 3) == 0

    def test_ordered_product_restricted(self, unenforced_db):
        with pytest.raises(RestrictedDeleteError):
            ProductService(unenforced_db).delete(2)
        assert count(unenforced_db, Inventory, Inventory.product_id == 2) == 1

    def test_supplier_delete_nulls_products(self, unenforced_db):
        delete_row(unenforced_db, Supplier, 1)
        unenforced_db.commit()
        assert count(unenforced_db, Product, Product.supplier_id.is_(None)) == 10
        assert count(unenforced_db, Product) == 25

    def test_category_delete_orphans_children(self, unenforced_db):
        service = CategoryService(unenforced_db)
        laptops = service.create(CategoryCreate(name="Laptops", parent_id=1))
        service.delete(1)
        assert unenforced_db.get(Category, laptops.category_id).parent_id is None
        assert count(unenforced_db, ProductCategory, ProductCategory.category_id == 1) == 0
        assert count(unenforced_db, Product) == 25

def test_dependent_writes_do_not_select_from_their_table(db, seeded_engine):
    service = CategoryService(db)
    service.create(CategoryCreate(name="Laptops", parent_id=1))

    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(seeded_engine, "before_cursor_execute", record)
    try:
        service.delete(1)
    finally:
        event.remove(seeded_engine, "before_cursor_execute", record)

    writes = [s for s in statements if s.lstrip().upper().startswith(("UPDATE", "DELETE"))]
    assert any(s.lstrip().upper().startswith("UPDATE CATEGORIES") for s in writes)
    assert [s for s in writes if "SELECT" in s.upper()] == []
