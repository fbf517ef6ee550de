from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

BigId = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

ENUMS = {
    "user_role": ("customer", "admin"),
    "order_status": ("pending", "processing", "shipped", "delivered", "cancelled", "returned"),
    "payment_method": ("card", "mpesa", "paypal", "bank_transfer"),
    "payment_status": ("pending", "completed", "failed", "refunded"),
}

def _enum(name):
    return sa.Enum(*ENUMS[name], name=name, create_constraint=True)

def _created_at(name='created_at'):
    return sa.Column(name, sa.DateTime, nullable=False, server_default=sa.func.now())

def upgrade():
    # Referenced tables first
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer, primary_key=True),
        sa.Column('first_name', sa.String(80), nullable=False),
        sa.Column('last_name', sa.String(80), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('phone', sa.String(30)),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', _enum('user_role'), nullable=False, server_default='customer'),
        _created_at(),
        _created_at('updated_at'),
    )
    op.create_table(
        'addresses',
        sa.Column('address_id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('label', sa.String(50)),
        sa.Column('street', sa.String(255), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100)),
        sa.Column('postal_code', sa.String(20)),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('is_default', sa.Boolean, nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_table(
        'suppliers',
        sa.Column('supplier_id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('contact_email', sa.String(255)),
        sa.Column('contact_phone', sa.String(50)),
        sa.Column('address', sa.Text),
        _created_at(),
    )
    op.create_table(
        'categories',
        sa.Column('category_id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(120), nullable=False, unique=True),
        sa.Column('description', sa.Text),
        # Self reference: the target is the table being created
        sa.Column('parent_id', sa.Integer, sa.ForeignKey('categories.category_id', ondelete='SET NULL')),
        _created_at(),
    )
    op.create_table(
        'products',
        sa.Column('product_id', sa.Integer, primary_key=True),
        sa.Column('sku', sa.String(64), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('cost_price', sa.Numeric(12, 2)),
        sa.Column('supplier_id', sa.Integer, sa.ForeignKey('suppliers.supplier_id', ondelete='SET NULL')),
        sa.Column('active', sa.Boolean, nullable=False, server_default=sa.true()),
        _created_at(),
        _created_at('updated_at'),
        sa.CheckConstraint('price >= 0', name='price_nonnegative'),
        sa.CheckConstraint('cost_price IS NULL OR cost_price >= 0', name='cost_price_nonnegative'),
    )
    op.create_table(
        'product_categories',
        sa.Column('product_id', sa.Integer, sa.ForeignKey('products.product_id', ondelete='CASCADE'), primary_key=True),
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.category_id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'product_images',
        sa.Column('image_id', sa.Integer, primary_key=True),
        sa.Column('product_id', sa.Integer, sa.ForeignKey('products.product_id', ondelete='CASCADE'), nullable=False),
        sa.Column('image_url', sa.String(1024), nullable=False),
        sa.Column('alt_text', sa.String(255)),
        sa.Column('is_primary', sa.Boolean, nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_table(
        'inventory',
        sa.Column('inventory_id', sa.Integer, primary_key=True),
        sa.Column('product_id', sa.Integer, sa.ForeignKey('products.product_id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('quantity', sa.Integer, nullable=False, server_default='0'),
        sa.Column('warehouse_location', sa.String(255)),
        _created_at('last_updated'),
        sa.CheckConstraint('quantity >= 0', name='quantity_nonnegative'),
    )
    op.create_table(
        'orders',
        sa.Column('order_id', BigId, primary_key=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.user_id', ondelete='RESTRICT'), nullable=False),
        sa.Column('shipping_address_id', sa.Integer, sa.ForeignKey('addresses.address_id', ondelete='RESTRICT'), nullable=False),
        sa.Column('billing_address_id', sa.Integer, sa.ForeignKey('addresses.address_id', ondelete='SET NULL')),
        sa.Column('order_status', _enum('order_status'), nullable=False, server_default='pending'),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('shipping_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('tax', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        _created_at('placed_at'),
        _created_at('updated_at'),
        sa.CheckConstraint('subtotal >= 0', name='subtotal_nonnegative'),
        sa.CheckConstraint('shipping_fee >= 0', name='shipping_fee_nonnegative'),
        sa.CheckConstraint('tax >= 0', name='tax_nonnegative'),
        sa.CheckConstraint('total >= 0', name='total_nonnegative'),
    )
    op.create_table(
        'order_items',
        sa.Column('order_id', BigId, sa.ForeignKey('orders.order_id', ondelete='CASCADE'), primary_key=True),
        sa.Column('product_id', sa.Integer, sa.ForeignKey('products.product_id', ondelete='RESTRICT'), primary_key=True),
        sa.Column('quantity', sa.Integer, nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.CheckConstraint('quantity > 0', name='quantity_positive'),
        sa.CheckConstraint('unit_price >= 0', name='unit_price_nonnegative'),
        sa.CheckConstraint('discount >= 0', name='discount_nonnegative'),
    )
    op.create_table(
        'payments',
        sa.Column('payment_id', BigId, primary_key=True),
        sa.Column('order_id', BigId, sa.ForeignKey('orders.order_id', ondelete='CASCADE'), nullable=False),
        sa.Column('payment_date', sa.DateTime, server_default=sa.func.now()),
        sa.Column('payment_method', _enum('payment_method'), nullable=False),
        sa.Column('status', _enum('payment_status'), nullable=False, server_default='pending'),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('transaction_reference', sa.String(255), unique=True),
        sa.Column('paid_at', sa.DateTime),
        _created_at(),
        sa.CheckConstraint('amount >= 0', name='amount_nonnegative'),
    )
    op.create_table(
        'reviews',
        sa.Column('review_id', BigId, primary_key=True),
        sa.Column('product_id', sa.Integer, sa.ForeignKey('products.product_id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.SmallInteger, nullable=False),
        sa.Column('title', sa.String(255)),
        sa.Column('body', sa.Text),
        _created_at(),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='rating_range'),
        sa.UniqueConstraint('product_id', 'user_id'),
    )
    op.create_table(
        'product_price_history',
        sa.Column('history_id', BigId, primary_key=True),
        sa.Column('product_id', sa.Integer, sa.ForeignKey('products.product_id', ondelete='CASCADE'), nullable=False),
        sa.Column('old_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('new_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('changed_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('changed_by', sa.Integer, sa.ForeignKey('users.user_id', ondelete='SET NULL')),
    )

def downgrade():
    for table in (
        'product_price_history', 'reviews', 'payments', 'order_items', 'orders', 'inventory',
        'product_images', 'product_categories', 'products', 'categories', 'suppliers',
        'addresses', 'users',
    ):
        op.drop_table(table)
    bind = op.get_bind()
    for name in ENUMS:
        sa.Enum(name=name).drop(bind, checkfirst=True)
