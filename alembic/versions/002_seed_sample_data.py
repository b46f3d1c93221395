"""Seed sample catalog data

Revision ID: 002_seed_sample_data
Revises: 001_initial
Create Date: 2025-09-25 00:00:01.000000

Tags: seed, catalog
"""
from datetime import date
from typing import Sequence, Union
import logging

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_seed_sample_data'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

logger = logging.getLogger(__name__)

# Lightweight table stubs: the migration must not depend on the current models
categories = sa.table(
    'categories',
    sa.column('category_id', sa.Integer),
    sa.column('category_name', sa.String),
    sa.column('description', sa.Text),
)
publishers = sa.table(
    'publishers',
    sa.column('publisher_id', sa.Integer),
    sa.column('publisher_name', sa.String),
    sa.column('established_year', sa.Integer),
)
authors = sa.table(
    'authors',
    sa.column('author_id', sa.Integer),
    sa.column('first_name', sa.String),
    sa.column('last_name', sa.String),
    sa.column('nationality', sa.String),
)
books = sa.table(
    'books',
    sa.column('book_id', sa.Integer),
    sa.column('isbn', sa.String),
    sa.column('title', sa.String),
    sa.column('publication_year', sa.Integer),
    sa.column('publisher_id', sa.Integer),
    sa.column('category_id', sa.Integer),
    sa.column('pages', sa.Integer),
)
book_authors = sa.table(
    'book_authors',
    sa.column('book_id', sa.Integer),
    sa.column('author_id', sa.Integer),
)
book_copies = sa.table(
    'book_copies',
    sa.column('book_id', sa.Integer),
    sa.column('copy_number', sa.Integer),
    sa.column('acquisition_date', sa.Date),
    sa.column('status', sa.String),
)

CATEGORY_ROWS = [
    {'category_name': 'Fiction', 'description': 'Imaginative literature including novels and short stories'},
    {'category_name': 'Science Fiction',
     'description': 'Fiction based on imagined future scientific or technological advances'},
    {'category_name': 'Mystery', 'description': 'Fiction involving solving a crime or unusual event'},
    {'category_name': 'Biography', 'description': 'Accounts of peoples lives'},
    {'category_name': 'Science', 'description': 'Books about scientific topics'},
    {'category_name': 'History', 'description': 'Historical accounts and analysis'},
]

PUBLISHER_ROWS = [
    {'publisher_name': 'Penguin Random House', 'established_year': 2013},
    {'publisher_name': 'HarperCollins', 'established_year': 1817},
    {'publisher_name': 'Macmillan Publishers', 'established_year': 1843},
]

AUTHOR_ROWS = [
    {'first_name': 'George', 'last_name': 'Orwell', 'nationality': 'British'},
    {'first_name': 'Isaac', 'last_name': 'Asimov', 'nationality': 'American'},
    {'first_name': 'Agatha', 'last_name': 'Christie', 'nationality': 'British'},
    {'first_name': 'Stephen', 'last_name': 'Hawking', 'nationality': 'British'},
]

# isbn, title, year, publisher, category, pages, author (first name, last name)
BOOK_ROWS = [
    ('978-0451524935', '1984', 1949, 'Penguin Random House', 'Fiction', 328, ('George', 'Orwell')),
    ('978-0553293357', 'Foundation', 1951, 'HarperCollins', 'Science Fiction', 255, ('Isaac', 'Asimov')),
    ('978-0062073485', 'Murder on the Orient Express', 1934, 'HarperCollins', 'Mystery', 256, ('Agatha', 'Christie')),
    ('978-0553380163', 'A Brief History of Time', 1988, 'Macmillan Publishers', 'Science', 256, ('Stephen', 'Hawking')),
]

# isbn, copy_number, acquisition_date, status
COPY_ROWS = [
    ('978-0451524935', 1, '2023-01-15', 'Available'),
    ('978-0451524935', 2, '2023-02-20', 'Available'),
    ('978-0553293357', 1, '2023-03-10', 'Checked Out'),
    ('978-0062073485', 1, '2023-01-05', 'Available'),
    ('978-0553380163', 1, '2023-04-15', 'Under Maintenance'),
]


def _id_map(connection, table, key_column, id_column):
    rows = connection.execute(sa.select(table.c[key_column], table.c[id_column])).all()
    return {key: row_id for key, row_id in rows}


def _author_id_map(connection):
    rows = connection.execute(
        sa.select(authors.c.first_name, authors.c.last_name, authors.c.author_id)
    ).all()
    return {(first_name, last_name): author_id for first_name, last_name, author_id in rows}


def _is_sample_author():
    return sa.or_(*[
        sa.and_(authors.c.first_name == row['first_name'], authors.c.last_name == row['last_name'])
        for row in AUTHOR_ROWS
    ])


def upgrade() -> None:
    """
    Insert the sample catalog. Ids are looked up by natural key after each
    stage instead of being assumed.
    """
    connection = op.get_bind()

    op.bulk_insert(categories, CATEGORY_ROWS)
    op.bulk_insert(publishers, PUBLISHER_ROWS)
    op.bulk_insert(authors, AUTHOR_ROWS)

    category_ids = _id_map(connection, categories, 'category_name', 'category_id')
    publisher_ids = _id_map(connection, publishers, 'publisher_name', 'publisher_id')
    author_ids = _author_id_map(connection)

    op.bulk_insert(books, [
        {
            'isbn': isbn,
            'title': title,
            'publication_year': year,
            'publisher_id': publisher_ids[publisher],
            'category_id': category_ids[category],
            'pages': pages,
        }
        for isbn, title, year, publisher, category, pages, _ in BOOK_ROWS
    ])

    book_ids = _id_map(connection, books, 'isbn', 'book_id')

    op.bulk_insert(book_authors, [
        {'book_id': book_ids[isbn], 'author_id': author_ids[author]}
        for isbn, _, _, _, _, _, author in BOOK_ROWS
    ])
    op.bulk_insert(book_copies, [
        {
            'book_id': book_ids[isbn],
            'copy_number': copy_number,
            'acquisition_date': date.fromisoformat(acquired),
            'status': status,
        }
        for isbn, copy_number, acquired, status in COPY_ROWS
    ])

    logger.info(
        "Seeded %s categories, %s publishers, %s authors, %s books, %s copies",
        len(CATEGORY_ROWS), len(PUBLISHER_ROWS), len(AUTHOR_ROWS), len(BOOK_ROWS), len(COPY_ROWS)
    )


def downgrade() -> None:
    """Remove the sample rows (copies and author links cascade with the books)."""
    isbns = [row[0] for row in BOOK_ROWS]
    op.execute(books.delete().where(books.c.isbn.in_(isbns)))
    op.execute(authors.delete().where(_is_sample_author()))
    op.execute(publishers.delete().where(
        publishers.c.publisher_name.in_([row['publisher_name'] for row in PUBLISHER_ROWS])
    ))
    op.execute(categories.delete().where(
        categories.c.category_name.in_([row['category_name'] for row in CATEGORY_ROWS])
    ))
