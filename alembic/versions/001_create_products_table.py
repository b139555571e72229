"""Create products and product_reviews tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create products and product_reviews tables."""
    # Products table
    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0.00', index=True),
        sa.Column('image', sa.String(1000), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('brand', sa.String(100), nullable=True),
        sa.Column('count_in_stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rating', sa.Numeric(2, 1), nullable=False, server_default='0.0', index=True),
        sa.Column('num_reviews', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_by', sa.String(100), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'), index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Product reviews table
    op.create_table(
        'product_reviews',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', sa.String(100), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('rating', sa.SmallInteger(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating_range'),
    )

    # One review per product and author
    op.create_unique_constraint(
        'uq_reviews_product_user',
        'product_reviews',
        ['product_id', 'user_id'],
    )


def downgrade() -> None:
    """Drop product_reviews and products tables."""
    op.drop_table('product_reviews')
    op.drop_table('products')
