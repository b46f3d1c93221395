import logging
from datetime import date

from sqlalchemy.orm import Session

import models  # noqa: F401  registers every mapped class
from database import SessionLocal, commit_and_refresh
from .Catalog_model import Author, Publisher, Category, Book, BookAuthor
from .Copy_model import BookCopy, CopyStatus

logger = logging.getLogger(__name__)

# Sample rows, in insertion order. On an empty database the generated ids are
# 1..n in this order (book_id=1 is "1984", and so on).
SAMPLE_CATEGORIES = [
    ("Fiction", "Imaginative literature including novels and short stories"),
    ("Science Fiction", "Fiction based on imagined future scientific or technological advances"),
    ("Mystery", "Fiction involving solving a crime or unusual event"),
    ("Biography", "Accounts of peoples lives"),
    ("Science", "Books about scientific topics"),
    ("History", "Historical accounts and analysis"),
]

SAMPLE_PUBLISHERS = [
    ("Penguin Random House", 2013),
    ("HarperCollins", 1817),
    ("Macmillan Publishers", 1843),
]

SAMPLE_AUTHORS = [
    ("George", "Orwell", "British"),
    ("Isaac", "Asimov", "American"),
    ("Agatha", "Christie", "British"),
    ("Stephen", "Hawking", "British"),
]

# isbn, title, publication_year, publisher, category, pages, author (first, last)
SAMPLE_BOOKS = [
    ("978-0451524935", "1984", 1949, "Penguin Random House", "Fiction", 328, ("George", "Orwell")),
    ("978-0553293357", "Foundation", 1951, "HarperCollins", "Science Fiction", 255, ("Isaac", "Asimov")),
    ("978-0062073485", "Murder on the Orient Express", 1934, "HarperCollins", "Mystery", 256,
     ("Agatha", "Christie")),
    ("978-0553380163", "A Brief History of Time", 1988, "Macmillan Publishers", "Science", 256,
     ("Stephen", "Hawking")),
]

# isbn, copy_number, acquisition_date, status
SAMPLE_COPIES = [
    ("978-0451524935", 1, date(2023, 1, 15), CopyStatus.AVAILABLE),
    ("978-0451524935", 2, date(2023, 2, 20), CopyStatus.AVAILABLE),
    ("978-0553293357", 1, date(2023, 3, 10), CopyStatus.CHECKED_OUT),
    ("978-0062073485", 1, date(2023, 1, 5), CopyStatus.AVAILABLE),
    ("978-0553380163", 1, date(2023, 4, 15), CopyStatus.UNDER_MAINTENANCE),
]


def seed_sample_data(db: Session) -> int:
    """
    Insert the sample catalog (categories, publishers, authors, books, author
    links and copies). Rows that already exist are left alone, so running it
    twice is harmless. Returns the number of rows inserted.
    """
    inserted = 0

    categories = {}
    for name, description in SAMPLE_CATEGORIES:
        category = db.query(Category).filter(Category.category_name == name).first()
        if category is None:
            category = Category(category_name=name, description=description)
            db.add(category)
            inserted += 1
        categories[name] = category

    publishers = {}
    for name, established_year in SAMPLE_PUBLISHERS:
        publisher = db.query(Publisher).filter(Publisher.publisher_name == name).first()
        if publisher is None:
            publisher = Publisher(publisher_name=name, established_year=established_year)
            db.add(publisher)
            inserted += 1
        publishers[name] = publisher

    authors = {}
    for first_name, last_name, nationality in SAMPLE_AUTHORS:
        author = (
            db.query(Author)
            .filter(Author.first_name == first_name, Author.last_name == last_name)
            .first()
        )
        if author is None:
            author = Author(first_name=first_name, last_name=last_name, nationality=nationality)
            db.add(author)
            inserted += 1
        authors[(first_name, last_name)] = author

    # Flush per stage so generated ids follow the sample order
    db.flush()

    books = {}
    for isbn, title, year, publisher_name, category_name, pages, author_key in SAMPLE_BOOKS:
        book = db.query(Book).filter(Book.isbn == isbn).first()
        if book is None:
            book = Book(
                isbn=isbn,
                title=title,
                publication_year=year,
                publisher=publishers[publisher_name],
                category=categories[category_name],
                pages=pages,
            )
            db.add(book)
            db.flush()
            db.add(BookAuthor(book_id=book.book_id, author_id=authors[author_key].author_id))
            inserted += 2
        books[isbn] = book

    db.flush()

    for isbn, copy_number, acquired, status in SAMPLE_COPIES:
        book = books[isbn]
        exists = (
            db.query(BookCopy)
            .filter(BookCopy.book_id == book.book_id, BookCopy.copy_number == copy_number)
            .first()
        )
        if exists is None:
            db.add(BookCopy(book_id=book.book_id, copy_number=copy_number, acquisition_date=acquired, status=status))
            inserted += 1

    commit_and_refresh(db, None, "seed sample data")
    logger.info("Sample data seeded | %s row(s) inserted", inserted)
    return inserted


def seed_default_catalog() -> None:
    """
    Ensure the sample catalog exists, using a fresh session.
    Failures are logged, not raised, so start-up can continue without samples.
    """
    try:
        with SessionLocal() as session:
            seed_sample_data(session)
    except Exception as exc:  # pragma: no cover - start-up logging
        logger.warning("Unable to seed sample data: %s", exc)
