import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

import models  # noqa: F401  registers every mapped class
from database import commit_and_refresh
from .Catalog_model import Author, Publisher, Category, Book, BookAuthor
from .Copy_model import BookCopy
from .Catalog_schema import AuthorCreate, PublisherCreate, CategoryCreate, BookCreate, BookCopyCreate

logger = logging.getLogger(__name__)


def create_author(db: Session, author_data: AuthorCreate) -> Author:
    author = Author(**author_data.model_dump())
    db.add(author)
    return commit_and_refresh(db, author, "create author")


def create_publisher(db: Session, publisher_data: PublisherCreate) -> Publisher:
    publisher = Publisher(**publisher_data.model_dump())
    db.add(publisher)
    return commit_and_refresh(db, publisher, "create publisher")


def delete_publisher(db: Session, publisher_id: int) -> bool:
    """Refused by the database (IntegrityError) while any book references the publisher."""
    publisher = db.query(Publisher).filter(Publisher.publisher_id == publisher_id).first()
    if publisher is None:
        return False
    db.delete(publisher)
    commit_and_refresh(db, None, f"delete publisher {publisher_id}")
    return True


def create_category(db: Session, category_data: CategoryCreate) -> Category:
    category = Category(**category_data.model_dump())
    db.add(category)
    return commit_and_refresh(db, category, "create category")


def get_category_children(db: Session, category_id: int) -> List[Category]:
    return (
        db.query(Category)
        .filter(Category.parent_category_id == category_id)
        .order_by(Category.category_name.asc())
        .all()
    )


def delete_category(db: Session, category_id: int) -> bool:
    """
    Delete a category. Sub-categories become top-level (parent set to NULL);
    books filed under it block the delete.
    """
    category = db.query(Category).filter(Category.category_id == category_id).first()
    if category is None:
        return False
    db.delete(category)
    commit_and_refresh(db, None, f"delete category {category_id}")
    logger.info(f"Category deleted | Category ID: {category_id}")
    return True


def create_book(db: Session, book_data: BookCreate) -> Book:
    """Create a book together with its ordered author links."""
    fields = book_data.model_dump(exclude={"author_ids"})
    book = Book(**fields)
    for position, author_id in enumerate(book_data.author_ids, start=1):
        book.book_authors.append(BookAuthor(author_id=author_id, author_order=position))

    db.add(book)
    commit_and_refresh(db, book, f"create book {book_data.isbn}")
    logger.info(f"Book created | Book ID: {book.book_id} | ISBN: {book.isbn} | Authors: {book_data.author_ids}")
    return book


def get_book(db: Session, book_id: int) -> Optional[Book]:
    return db.query(Book).filter(Book.book_id == book_id).first()


def get_book_by_isbn(db: Session, isbn: str) -> Optional[Book]:
    return db.query(Book).filter(Book.isbn == isbn.strip()).first()


def delete_book(db: Session, book_id: int) -> bool:
    """Copies, author links and reservations are removed with the book."""
    book = get_book(db, book_id)
    if book is None:
        return False
    db.delete(book)
    commit_and_refresh(db, None, f"delete book {book_id}")
    logger.info(f"Book deleted | Book ID: {book_id}")
    return True


def next_copy_number(db: Session, book_id: int) -> int:
    highest = db.query(func.max(BookCopy.copy_number)).filter(BookCopy.book_id == book_id).scalar()
    return (highest or 0) + 1


def add_book_copy(db: Session, book_id: int, copy_data: BookCopyCreate) -> BookCopy:
    """
    Register a physical copy. (book_id, copy_number) is unique, so an explicit
    number that is already taken raises IntegrityError.
    """
    fields = copy_data.model_dump()
    if fields["copy_number"] is None:
        fields["copy_number"] = next_copy_number(db, book_id)

    copy = BookCopy(book_id=book_id, **fields)
    db.add(copy)
    commit_and_refresh(db, copy, f"add copy {fields['copy_number']} of book {book_id}")
    logger.info(f"Book copy added | Copy ID: {copy.copy_id} | Book ID: {book_id} | Copy #: {copy.copy_number}")
    return copy


def get_copies_for_book(db: Session, book_id: int) -> List[BookCopy]:
    return (
        db.query(BookCopy)
        .filter(BookCopy.book_id == book_id)
        .order_by(BookCopy.copy_number.asc())
        .all()
    )
