"""Initial library schema

Revision ID: 001_initial
Revises:
Create Date: 2025-09-25 00:00:00.000000

Tags: schema, initial
"""
from typing import Sequence, Union
import logging

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = ('schema',)
depends_on: Union[str, Sequence[str], None] = None

logger = logging.getLogger(__name__)

YEAR = sa.Integer().with_variant(mysql.YEAR(), "mysql")
CURRENT_TIMESTAMP = sa.text("CURRENT_TIMESTAMP")

ENUM_TYPES = {
    'membership_status': ('Active', 'Suspended', 'Expired'),
    'copy_status': ('Available', 'Checked Out', 'Lost', 'Damaged', 'Under Maintenance'),
    'loan_status': ('Active', 'Returned', 'Overdue'),
    'reservation_status': ('Active', 'Fulfilled', 'Cancelled'),
    'fine_reason': ('Late Return', 'Book Damage', 'Book Lost', 'Other'),
    'payment_status': ('Pending', 'Paid', 'Waived'),
    'staff_status': ('Active', 'Inactive'),
    'audit_action': ('INSERT', 'UPDATE', 'DELETE'),
}


MEMBERS_UPDATED_AT_DDL = {
    'mysql': [
        "ALTER TABLE members MODIFY updated_at TIMESTAMP NULL "
        "DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
    ],
    'sqlite': [
        "CREATE TRIGGER trg_members_updated_at AFTER UPDATE ON members "
        "FOR EACH ROW WHEN NEW.updated_at IS OLD.updated_at "
        "BEGIN "
        "UPDATE members SET updated_at = CURRENT_TIMESTAMP WHERE member_id = NEW.member_id; "
        "END",
    ],
    'postgresql': [
        "CREATE OR REPLACE FUNCTION set_members_updated_at() RETURNS TRIGGER AS $$ "
        "BEGIN "
        "IF NEW.updated_at IS NOT DISTINCT FROM OLD.updated_at THEN "
        "NEW.updated_at = CURRENT_TIMESTAMP; "
        "END IF; "
        "RETURN NEW; "
        "END; "
        "$$ LANGUAGE plpgsql",
        "CREATE TRIGGER trg_members_updated_at BEFORE UPDATE ON members "
        "FOR EACH ROW EXECUTE FUNCTION set_members_updated_at()",
    ],
}


def _enum(name: str) -> sa.Enum:
    return sa.Enum(*ENUM_TYPES[name], name=name, create_constraint=True)


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.TIMESTAMP(), server_default=CURRENT_TIMESTAMP, nullable=True)


def upgrade() -> None:
    """
    Create the twelve library tables in foreign-key order, then the
    secondary indexes.
    """
    op.create_table(
        'members',
        sa.Column('member_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('national_id', sa.String(length=20), nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=15), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('membership_date', sa.Date(), nullable=False),
        sa.Column('membership_status', _enum('membership_status'), server_default='Active', nullable=True),
        sa.Column('max_books_allowed', sa.Integer(), server_default='5', nullable=True),
        _created_at(),
        sa.Column('updated_at', sa.TIMESTAMP(), server_default=CURRENT_TIMESTAMP, nullable=True),
        sa.PrimaryKeyConstraint('member_id'),
        sa.UniqueConstraint('national_id'),
        sa.UniqueConstraint('email'),
    )
    for statement in MEMBERS_UPDATED_AT_DDL.get(op.get_context().dialect.name, ()):
        op.execute(statement)

    op.create_table(
        'authors',
        sa.Column('author_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('nationality', sa.String(length=50), nullable=True),
        sa.Column('biography', sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('author_id'),
    )

    op.create_table(
        'publishers',
        sa.Column('publisher_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('publisher_name', sa.String(length=100), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('contact_email', sa.String(length=100), nullable=True),
        sa.Column('contact_phone', sa.String(length=15), nullable=True),
        sa.Column('established_year', sa.SmallInteger(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('publisher_id'),
        sa.UniqueConstraint('publisher_name'),
    )

    op.create_table(
        'categories',
        sa.Column('category_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('category_name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('parent_category_id', sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['parent_category_id'], ['categories.category_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('category_id'),
        sa.UniqueConstraint('category_name'),
    )

    op.create_table(
        'books',
        sa.Column('book_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('isbn', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('edition', sa.String(length=20), nullable=True),
        sa.Column('publication_year', YEAR, nullable=True),
        sa.Column('publisher_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('pages', sa.Integer(), nullable=True),
        sa.Column('language', sa.String(length=30), server_default='English', nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['publisher_id'], ['publishers.publisher_id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.category_id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('book_id'),
        sa.UniqueConstraint('isbn'),
    )

    op.create_table(
        'book_authors',
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('author_order', sa.Integer(), server_default='1', nullable=True),
        sa.ForeignKeyConstraint(['book_id'], ['books.book_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['authors.author_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('book_id', 'author_id'),
    )

    op.create_table(
        'book_copies',
        sa.Column('copy_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('copy_number', sa.Integer(), nullable=False),
        sa.Column('acquisition_date', sa.Date(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('status', _enum('copy_status'), server_default='Available', nullable=True),
        sa.Column('location', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['book_id'], ['books.book_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('copy_id'),
        sa.UniqueConstraint('book_id', 'copy_number', name='unique_book_copy'),
    )

    op.create_table(
        'loans',
        sa.Column('loan_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('copy_id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('loan_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.Column('late_fee', sa.Numeric(precision=8, scale=2), server_default='0.00', nullable=True),
        sa.Column('loan_status', _enum('loan_status'), server_default='Active', nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['copy_id'], ['book_copies.copy_id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['member_id'], ['members.member_id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('loan_id'),
    )

    op.create_table(
        'reservations',
        sa.Column('reservation_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('reservation_date', sa.DateTime(), nullable=False),
        sa.Column('reservation_status', _enum('reservation_status'), server_default='Active', nullable=True),
        sa.Column('priority', sa.Integer(), server_default='1', nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['book_id'], ['books.book_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['member_id'], ['members.member_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('reservation_id'),
    )

    op.create_table(
        'fines',
        sa.Column('fine_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('loan_id', sa.Integer(), nullable=True),
        sa.Column('fine_amount', sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column('fine_date', sa.Date(), nullable=False),
        sa.Column('reason', _enum('fine_reason'), nullable=False),
        sa.Column('payment_status', _enum('payment_status'), server_default='Pending', nullable=True),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['member_id'], ['members.member_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['loan_id'], ['loans.loan_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('fine_id'),
    )

    op.create_table(
        'staff',
        sa.Column('staff_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=15), nullable=True),
        sa.Column('position', sa.String(length=50), nullable=False),
        sa.Column('hire_date', sa.Date(), nullable=False),
        sa.Column('salary', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('status', _enum('staff_status'), server_default='Active', nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('staff_id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'audit_log',
        sa.Column('log_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('table_name', sa.String(length=50), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('action', _enum('audit_action'), nullable=False),
        sa.Column('old_values', sa.JSON(none_as_null=True), nullable=True),
        sa.Column('new_values', sa.JSON(none_as_null=True), nullable=True),
        sa.Column('staff_id', sa.Integer(), nullable=True),
        sa.Column('change_timestamp', sa.TIMESTAMP(), server_default=CURRENT_TIMESTAMP, nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.staff_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('log_id'),
    )

    op.create_index('idx_loans_member_status', 'loans', ['member_id', 'loan_status'], unique=False)
    op.create_index('idx_loans_due_date', 'loans', ['due_date'], unique=False)
    op.create_index('idx_book_copies_status', 'book_copies', ['status'], unique=False)
    op.create_index('idx_members_email', 'members', ['email'], unique=False)
    op.create_index('idx_books_title', 'books', ['title'], unique=False)
    op.create_index('idx_authors_name', 'authors', ['last_name', 'first_name'], unique=False)
    op.create_index('idx_reservations_status', 'reservations', ['reservation_status'], unique=False)
    op.create_index('idx_fines_status', 'fines', ['payment_status'], unique=False)

    logger.info("Created library schema (12 tables, 8 secondary indexes)")


def downgrade() -> None:
    """Drop every library table in reverse foreign-key order."""
    for table_name in (
        'audit_log', 'staff', 'fines', 'reservations', 'loans', 'book_copies',
        'book_authors', 'books', 'categories', 'publishers', 'authors', 'members',
    ):
        op.drop_table(table_name)

    # PostgreSQL keeps named enum types after their tables are gone
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name in ENUM_TYPES:
            sa.Enum(name=name).drop(bind, checkfirst=True)
        op.execute('DROP FUNCTION IF EXISTS set_members_updated_at()')
