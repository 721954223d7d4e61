"""group checkout schema: rooms, room cart, contributions, payment sessions

Revision ID: 5b1d2e7f9a10
Revises:
Create Date: 2026-10-19 09:30:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5b1d2e7f9a10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'member',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('phone', sa.String(15), nullable=False, unique=True),
        sa.Column('name', sa.String(100)),
        sa.Column('role', sa.String(20)),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_table(
        'shopping_room',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('creator_id', sa.BigInteger(), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('member_count', sa.Integer(), nullable=False),
        sa.Column('delivery_mode', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('ledger_version', sa.Integer(), nullable=False),
        sa.Column('placed_order_id', sa.BigInteger()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_table(
        'room_member',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('shopping_room.id'), nullable=False),
        sa.Column('member_id', sa.BigInteger(), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('joined_at', sa.DateTime()),
        sa.UniqueConstraint('room_id', 'member_id', name='uq_room_member'),
    )
    op.create_table(
        'room_cart_item',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('shopping_room.id'), nullable=False),
        sa.Column('product_id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('unit_price', sa.BigInteger(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('added_by', sa.BigInteger(), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('order_id', sa.BigInteger()),
        sa.Column('added_at', sa.DateTime()),
        sa.Column('last_updated', sa.DateTime()),
    )
    op.create_index('ix_room_cart_item_room_id', 'room_cart_item', ['room_id'])
    op.create_table(
        'contribution',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('shopping_room.id'), nullable=False),
        sa.Column('cart_item_id', sa.BigInteger(), sa.ForeignKey('room_cart_item.id'), nullable=False),
        sa.Column('contributor_id', sa.BigInteger(), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('transaction_id', sa.String(120)),
        sa.Column('created_at', sa.DateTime()),
        sa.UniqueConstraint('contributor_id', 'cart_item_id', 'transaction_id',
                            name='uq_contribution_contributor_item_txn'),
    )
    op.create_index('ix_contribution_room_item', 'contribution', ['room_id', 'cart_item_id'])
    op.create_table(
        'payment_session',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('reference_id', sa.String(120), nullable=False, unique=True),
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('shopping_room.id'), nullable=False),
        sa.Column('cart_item_id', sa.BigInteger(), sa.ForeignKey('room_cart_item.id', ondelete='SET NULL'), nullable=True),
        sa.Column('contributor_id', sa.BigInteger(), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('provider_transaction_id', sa.String(120)),
        sa.Column('contribution_id', sa.BigInteger(), sa.ForeignKey('contribution.id')),
        sa.Column('upi_intent', sa.String(500)),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('settled_at', sa.DateTime()),
    )
    op.create_table(
        'delivery_address',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('shopping_room.id'), nullable=False),
        sa.Column('member_id', sa.BigInteger(), sa.ForeignKey('member.id')),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('full_name', sa.String(100)),
        sa.Column('phone', sa.String(20)),
        sa.Column('address_line1', sa.String(255)),
        sa.Column('address_line2', sa.String(255)),
        sa.Column('city', sa.String(100)),
        sa.Column('state', sa.String(100)),
        sa.Column('pincode', sa.String(10)),
        sa.Column('updated_at', sa.DateTime()),
        sa.UniqueConstraint('room_id', 'member_id', 'is_primary', name='uq_delivery_address_slot'),
    )
    op.create_table(
        'member_wallet',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('member_id', sa.BigInteger(), nullable=False, unique=True),
        sa.Column('balance', sa.BigInteger()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_table(
        'wallet_transaction',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('member_id', sa.BigInteger(), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('reference', sa.Text()),
        sa.Column('status', sa.String(20)),
        sa.Column('source', sa.String(50)),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_wallet_transaction_member_id', 'wallet_transaction', ['member_id'])
    op.create_table(
        'group_order',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('shopping_room.id'), nullable=False, unique=True),
        sa.Column('placed_by', sa.BigInteger(), sa.ForeignKey('member.id'), nullable=False),
        sa.Column('status', sa.String(30)),
        sa.Column('items_total', sa.BigInteger(), nullable=False),
        sa.Column('delivery_fee', sa.BigInteger(), nullable=False),
        sa.Column('total_amount', sa.BigInteger(), nullable=False),
        sa.Column('delivery_mode', sa.String(20), nullable=False),
        sa.Column('payment_summary', sa.JSON()),
        sa.Column('delivery_addresses', sa.JSON()),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_table(
        'group_order_item',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('order_id', sa.BigInteger(), sa.ForeignKey('group_order.id'), nullable=False),
        sa.Column('cart_item_id', sa.BigInteger(), nullable=False),
        sa.Column('product_id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(255)),
        sa.Column('unit_price', sa.BigInteger()),
        sa.Column('quantity', sa.Integer()),
        sa.Column('subtotal', sa.BigInteger()),
        sa.Column('funded_amount', sa.BigInteger()),
    )
    op.create_table(
        'order_status_log',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('order_id', sa.BigInteger(), sa.ForeignKey('group_order.id'), nullable=False),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('updated_by', sa.BigInteger(), nullable=False),
        sa.Column('details', sa.Text()),
        sa.Column('timestamp', sa.DateTime()),
    )


def downgrade():
    op.drop_table('order_status_log')
    op.drop_table('group_order_item')
    op.drop_table('group_order')
    op.drop_index('ix_wallet_transaction_member_id', table_name='wallet_transaction')
    op.drop_table('wallet_transaction')
    op.drop_table('member_wallet')
    op.drop_table('delivery_address')
    op.drop_table('payment_session')
    op.drop_index('ix_contribution_room_item', table_name='contribution')
    op.drop_table('contribution')
    op.drop_index('ix_room_cart_item_room_id', table_name='room_cart_item')
    op.drop_table('room_cart_item')
    op.drop_table('room_member')
    op.drop_table('shopping_room')
    op.drop_table('member')
