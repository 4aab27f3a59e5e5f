"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-01-01 00:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

BigIntId = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(100), nullable=False, unique=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('gender', sa.String(20), nullable=False),
        sa.Column('dob', sa.Date(), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_users_id', 'users', ['id'])

    op.create_table(
        'buyers',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('phone', sa.String(20), nullable=False, unique=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('activation_code', sa.String(6), nullable=False),
        sa.Column('expired', sa.DateTime(), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_buyers_id', 'buyers', ['id'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_code', sa.String(50), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('image', sa.String(255), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('price', sa.Numeric(15, 2), nullable=False),
        sa.Column('desc', sa.Text(), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_products_id', 'products', ['id'])

    op.create_table(
        'orders',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('order_code', sa.String(50), nullable=False, unique=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('buyer_id', BigIntId, sa.ForeignKey('buyers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('total', sa.Numeric(15, 2), nullable=False),
        sa.Column('desc', sa.Text(), nullable=True),
        sa.Column('discount', sa.Numeric(15, 2), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_orders_id', 'orders', ['id'])

    op.create_table(
        'detail_orders',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('order_id', BigIntId, sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('price', sa.Numeric(15, 2), nullable=False),
        sa.Column('quantity', sa.Numeric(10, 2), nullable=False),
        sa.Column('sub_total', sa.Numeric(20, 4), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_detail_orders_id', 'detail_orders', ['id'])

    op.create_table(
        'ratings',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('order_id', BigIntId, sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('buyer_id', BigIntId, sa.ForeignKey('buyers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('order_id', 'product_id', 'buyer_id', name='uq_rating_order_product_buyer')
    )
    op.create_index('ix_ratings_id', 'ratings', ['id'])

    op.create_table(
        'vouchers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('expired_time', sa.DateTime(), nullable=False),
        sa.Column('quantity_used', sa.Integer(), nullable=False),
        sa.Column('quantity_max', sa.Integer(), nullable=False),
        sa.Column('buyer_id', BigIntId, sa.ForeignKey('buyers.id', ondelete='SET NULL'), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_vouchers_id', 'vouchers', ['id'])

    op.create_table(
        'books',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False, unique=True),
        sa.Column('author', sa.String(255), nullable=True),
        sa.Column('publisher', sa.String(255), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
    )
    op.create_index('ix_books_id', 'books', ['id'])


def downgrade():
    for table in ('books', 'vouchers', 'ratings', 'detail_orders', 'orders', 'products', 'buyers', 'users'):
        op.drop_index(f'ix_{table}_id', table_name=table)
        op.drop_table(table)
