"""Create product catalog tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create attribute type, category, product and specification tables."""
    # Attribute types
    op.create_table(
        'product_attribute_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('display_name', sa.String(200), nullable=False),
        sa.Column('validation_pattern', sa.String(500), nullable=False),
    )

    # Categories (self-referential tree)
    op.create_table(
        'product_categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False, index=True),
        sa.Column('parent_category_id', sa.Integer(),
                  sa.ForeignKey('product_categories.id'), nullable=True, index=True),
    )

    # Category specification
    op.create_table(
        'product_category_specification_attributes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_category_id', sa.Integer(),
                  sa.ForeignKey('product_categories.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('attribute_type_id', sa.Integer(),
                  sa.ForeignKey('product_attribute_types.id'), nullable=False),
    )

    # Products
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('product_categories.id'), nullable=False, index=True),
        sa.Column('active_version', sa.Integer(), nullable=True),
    )

    # Product specification history
    op.create_table(
        'product_specifications',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('product_id', 'version', name='uq_specifications_product_version'),
    )

    # Attribute values
    op.create_table(
        'product_attributes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_specification_id', sa.Integer(),
                  sa.ForeignKey('product_specifications.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('attribute_type_id', sa.Integer(),
                  sa.ForeignKey('product_attribute_types.id'), nullable=False, index=True),
        sa.Column('value', sa.String(1000), nullable=False),
    )


def downgrade() -> None:
    """Drop product catalog tables."""
    op.drop_table('product_attributes')
    op.drop_table('product_specifications')
    op.drop_table('products')
    op.drop_table('product_category_specification_attributes')
    op.drop_table('product_categories')
    op.drop_table('product_attribute_types')
