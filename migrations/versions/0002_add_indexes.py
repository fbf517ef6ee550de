from alembic import op

revision = '0002_add_indexes'
down_revision = '0001_init'
branch_labels = None
depends_on = None

# Common query patterns: product search by name, orders per user,
# stock lookup and "which orders contain this product"
INDEXES = (
    ('idx_products_name', 'products', ['name']),
    ('idx_orders_user', 'orders', ['user_id']),
    ('idx_inventory_product', 'inventory', ['product_id']),
    ('idx_order_items_product', 'order_items', ['product_id']),
)

def upgrade():
    for name, table, columns in INDEXES:
        op.create_index(name, table, columns)

def downgrade():
    for name, table, _ in reversed(INDEXES):
        op.drop_index(name, table_name=table)
