"""Create kitchen preparation tables

Revision ID: 20261019_0900_create_kitchen_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_0900_create_kitchen_tables'
down_revision = None
branch_labels = None
depends_on = None


ORDER_TYPE = sa.Enum('DINE_IN', 'TAKE_AWAY', 'DELIVERY', name='order_type')
ORDER_STATUS = sa.Enum(
    'PENDING', 'IN_PROGRESS', 'IN_PREPARATION', 'READY', 'DELIVERED',
    'COMPLETED', 'CANCELLED', name='order_status'
)
PREPARATION_STATUS = sa.Enum(
    'PENDING', 'IN_PROGRESS', 'READY', 'DELIVERED', 'CANCELLED',
    name='preparation_status'
)
PREPARATION_SCREEN_STATUS = sa.Enum(
    'PENDING', 'IN_PREPARATION', 'READY', name='preparation_screen_status'
)
PIZZA_HALF = sa.Enum('FULL', 'HALF_1', 'HALF_2', name='pizza_half')
CUSTOMIZATION_ACTION = sa.Enum('ADD', 'REMOVE', name='customization_action')


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table('preparation_screens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_preparation_screens_id', 'preparation_screens', ['id'])

    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='waiter'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('preparation_screen_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['preparation_screen_id'], ['preparation_screens.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_preparation_screen_id', 'users', ['preparation_screen_id'])

    op.create_table('products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('preparation_screen_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['preparation_screen_id'], ['preparation_screens.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_preparation_screen_id', 'products', ['preparation_screen_id'])

    op.create_table('product_variants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_product_variants_id', 'product_variants', ['id'])
    op.create_index('ix_product_variants_product_id', 'product_variants', ['product_id'])

    op.create_table('product_modifiers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_product_modifiers_id', 'product_modifiers', ['id'])

    op.create_table('pizza_customizations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('customization_type', sa.String(length=50), nullable=False,
                  server_default='INGREDIENT'),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pizza_customizations_id', 'pizza_customizations', ['id'])

    op.create_table('areas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_areas_id', 'areas', ['id'])

    op.create_table('tables',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('area_id', sa.Integer(), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(['area_id'], ['areas.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tables_id', 'tables', ['id'])
    op.create_index('ix_tables_area_id', 'tables', ['area_id'])

    op.create_table('customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('whatsapp_phone_number', sa.String(length=30), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_customers_id', 'customers', ['id'])

    op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('shift_order_number', sa.Integer(), nullable=False),
        sa.Column('order_type', ORDER_TYPE, nullable=False),
        sa.Column('order_status', ORDER_STATUS, nullable=False, server_default='PENDING'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('table_id', sa.Integer(), nullable=True),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['table_id'], ['tables.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_order_type', 'orders', ['order_type'])
    op.create_index('ix_orders_order_status', 'orders', ['order_status'])

    op.create_table('delivery_info',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('full_address', sa.Text(), nullable=True),
        sa.Column('recipient_name', sa.String(length=200), nullable=True),
        sa.Column('recipient_phone', sa.String(length=30), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id')
    )
    op.create_index('ix_delivery_info_id', 'delivery_info', ['id'])

    op.create_table('order_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('product_variant_id', sa.Integer(), nullable=True),
        sa.Column('preparation_status', PREPARATION_STATUS, nullable=False,
                  server_default='PENDING'),
        sa.Column('preparation_notes', sa.Text(), nullable=True),
        sa.Column('status_changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('prepared_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('prepared_by_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.ForeignKeyConstraint(['product_variant_id'], ['product_variants.id']),
        sa.ForeignKeyConstraint(['prepared_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_order_items_id', 'order_items', ['id'])
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_product_id', 'order_items', ['product_id'])
    op.create_index('ix_order_items_preparation_status', 'order_items', ['preparation_status'])

    op.create_table('order_item_modifiers',
        sa.Column('order_item_id', sa.Integer(), nullable=False),
        sa.Column('product_modifier_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['order_item_id'], ['order_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_modifier_id'], ['product_modifiers.id']),
        sa.PrimaryKeyConstraint('order_item_id', 'product_modifier_id')
    )

    op.create_table('selected_pizza_customizations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_item_id', sa.Integer(), nullable=False),
        sa.Column('pizza_customization_id', sa.Integer(), nullable=False),
        sa.Column('half', PIZZA_HALF, nullable=False, server_default='FULL'),
        sa.Column('action', CUSTOMIZATION_ACTION, nullable=False, server_default='ADD'),
        *timestamps(),
        sa.ForeignKeyConstraint(['order_item_id'], ['order_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['pizza_customization_id'], ['pizza_customizations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_selected_pizza_customizations_id', 'selected_pizza_customizations', ['id'])
    op.create_index(
        'ix_selected_pizza_customizations_order_item_id',
        'selected_pizza_customizations', ['order_item_id']
    )

    op.create_table('order_preparation_screen_statuses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('preparation_screen_id', sa.Integer(), nullable=False),
        sa.Column('status', PREPARATION_SCREEN_STATUS, nullable=False, server_default='PENDING'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('started_by_id', sa.Integer(), nullable=True),
        sa.Column('completed_by_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['preparation_screen_id'], ['preparation_screens.id']),
        sa.ForeignKeyConstraint(['started_by_id'], ['users.id']),
        sa.ForeignKeyConstraint(['completed_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id', 'preparation_screen_id', name='uq_order_preparation_screen')
    )
    op.create_index('ix_order_preparation_screen_statuses_id',
                    'order_preparation_screen_statuses', ['id'])
    op.create_index('ix_order_preparation_screen_statuses_order_id',
                    'order_preparation_screen_statuses', ['order_id'])
    op.create_index('ix_order_preparation_screen_statuses_preparation_screen_id',
                    'order_preparation_screen_statuses', ['preparation_screen_id'])


def downgrade():
    op.drop_table('order_preparation_screen_statuses')
    op.drop_table('selected_pizza_customizations')
    op.drop_table('order_item_modifiers')
    op.drop_table('order_items')
    op.drop_table('delivery_info')
    op.drop_table('orders')
    op.drop_table('customers')
    op.drop_table('tables')
    op.drop_table('areas')
    op.drop_table('pizza_customizations')
    op.drop_table('product_modifiers')
    op.drop_table('product_variants')
    op.drop_table('products')
    op.drop_table('users')
    op.drop_table('preparation_screens')

    bind = op.get_bind()
    for enum in (
        PREPARATION_SCREEN_STATUS, CUSTOMIZATION_ACTION, PIZZA_HALF,
        PREPARATION_STATUS, ORDER_STATUS, ORDER_TYPE,
    ):
        enum.drop(bind, checkfirst=True)
