from datetime import date

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import Author, Book, BookAuthor, BookCopy, Category, CopyStatus, Publisher, Reservation
from Catalog_module.bootstrap import seed_sample_data
from Catalog_module.Catalog_crud import (
    add_book_copy,
    create_book,
    create_category,
    delete_book,
    delete_category,
    delete_publisher,
    get_book_by_isbn,
    get_category_children,
    get_copies_for_book,
    next_copy_number,
)
from Catalog_module.Catalog_schema import BookCopyCreate, BookCreate, CategoryCreate
from Circulation_module.Circulation_crud import create_reservation
from Circulation_module.Circulation_schema import ReservationCreate


def _book_payload(**overrides):
    payload = dict(
        isbn="978-1111111111",
        title="Orphan",
        publisher_id=1,
        category_id=1,
        author_ids=[1],
    )
    payload.update(overrides)
    return BookCreate(**payload)


class TestBookForeignKeys:
    def test_unknown_publisher_is_rejected(self, seeded_db):
        with pytest.raises(IntegrityError):
            create_book(seeded_db, _book_payload(publisher_id=999))
        assert get_book_by_isbn(seeded_db, "978-1111111111") is None

    def test_unknown_category_is_rejected(self, seeded_db):
        with pytest.raises(IntegrityError):
            create_book(seeded_db, _book_payload(category_id=999))

    def test_unknown_author_is_rejected(self, seeded_db):
        with pytest.raises(IntegrityError):
            create_book(seeded_db, _book_payload(author_ids=[999]))

    def test_session_is_usable_after_violation(self, seeded_db):
        with pytest.raises(IntegrityError):
            create_book(seeded_db, _book_payload(publisher_id=999))
        book = create_book(seeded_db, _book_payload())
        assert book.book_id is not None
        assert book.language == "English"

    def test_duplicate_isbn_is_rejected(self, seeded_db):
        with pytest.raises(IntegrityError):
            create_book(seeded_db, _book_payload(isbn="978-0451524935"))


class TestDeleteRules:
    def test_publisher_with_books_cannot_be_deleted(self, seeded_db):
        with pytest.raises(IntegrityError):
            delete_publisher(seeded_db, 1)
        assert seeded_db.get(Publisher, 1) is not None

    def test_unused_publisher_can_be_deleted(self, db):
        db.add(Publisher(publisher_name="Unused House"))
        db.commit()
        publisher = db.query(Publisher).filter_by(publisher_name="Unused House").one()
        assert delete_publisher(db, publisher.publisher_id) is True
        assert delete_publisher(db, publisher.publisher_id) is False

    def test_category_with_books_cannot_be_deleted(self, seeded_db):
        with pytest.raises(IntegrityError):
            delete_category(seeded_db, 1)

    def test_deleting_parent_category_orphans_children(self, db):
        parent = create_category(db, CategoryCreate(category_name="Non-fiction"))
        child_a = create_category(db, CategoryCreate(category_name="Essays", parent_category_id=parent.category_id))
        child_b = create_category(db, CategoryCreate(category_name="Memoir", parent_category_id=parent.category_id))
        assert [c.category_name for c in get_category_children(db, parent.category_id)] == ["Essays", "Memoir"]

        assert delete_category(db, parent.category_id) is True

        db.expire_all()
        assert db.get(Category, child_a.category_id).parent_category_id is None
        assert db.get(Category, child_b.category_id).parent_category_id is None

    def test_deleting_book_cascades_to_copies_and_author_links(self, db, book, member):
        add_book_copy(db, book.book_id, BookCopyCreate())
        add_book_copy(db, book.book_id, BookCopyCreate())
        create_reservation(db, ReservationCreate(book_id=book.book_id, member_id=member.member_id))
        author_ids = [a.author_id for a in book.authors]
        book_id = book.book_id

        assert delete_book(db, book_id) is True

        assert db.query(BookCopy).filter(BookCopy.book_id == book_id).count() == 0
        assert db.query(BookAuthor).filter(BookAuthor.book_id == book_id).count() == 0
        assert db.query(Reservation).filter(Reservation.book_id == book_id).count() == 0
        # Authors themselves are untouched
        assert db.query(Author).filter(Author.author_id.in_(author_ids)).count() == 2

    def test_deleting_author_removes_only_the_link(self, db, book):
        author_id = book.authors[0].author_id
        db.delete(db.get(Author, author_id))
        db.commit()

        assert db.query(BookAuthor).filter(BookAuthor.author_id == author_id).count() == 0
        assert db.get(Book, book.book_id) is not None

    def test_delete_unknown_book_returns_false(self, db):
        assert delete_book(db, 12345) is False


class TestBookCopies:
    def test_duplicate_copy_number_is_rejected(self, db, book):
        add_book_copy(db, book.book_id, BookCopyCreate(copy_number=1))
        with pytest.raises(IntegrityError):
            add_book_copy(db, book.book_id, BookCopyCreate(copy_number=1))

    def test_same_copy_number_on_other_book_is_allowed(self, seeded_db):
        copy = add_book_copy(seeded_db, 3, BookCopyCreate(copy_number=2))
        assert copy.copy_number == 2

    def test_seeded_book_rejects_existing_copy_number(self, seeded_db):
        with pytest.raises(IntegrityError):
            add_book_copy(seeded_db, 1, BookCopyCreate(copy_number=1))

    def test_seeded_book_accepts_copy_number_three(self, seeded_db):
        copy = add_book_copy(seeded_db, 1, BookCopyCreate(copy_number=3, acquisition_date=date(2024, 5, 1)))
        assert copy.status == CopyStatus.AVAILABLE
        assert [c.copy_number for c in get_copies_for_book(seeded_db, 1)] == [1, 2, 3]

    def test_copy_number_defaults_to_next_free(self, seeded_db):
        assert next_copy_number(seeded_db, 1) == 3
        copy = add_book_copy(seeded_db, 1, BookCopyCreate())
        assert copy.copy_number == 3
        assert next_copy_number(seeded_db, 1) == 4

    def test_copy_for_unknown_book_is_rejected(self, db):
        with pytest.raises(IntegrityError):
            add_book_copy(db, 42, BookCopyCreate(copy_number=1))

    def test_status_outside_domain_is_rejected(self):
        with pytest.raises(ValidationError):
            BookCopyCreate(status="Stolen")


class TestBookAuthors:
    def test_author_order_follows_payload(self, book):
        assert [(a.last_name) for a in book.authors] == ["Beck", "Gamma"]
        assert [link.author_order for link in book.book_authors] == [1, 2]

    def test_book_requires_an_author(self):
        with pytest.raises(ValidationError):
            _book_payload(author_ids=[])

    def test_author_listed_twice_is_rejected(self):
        with pytest.raises(ValidationError):
            _book_payload(author_ids=[1, 1])


class TestSampleData:
    def test_seed_counts(self, seeded_db):
        assert seeded_db.query(Category).count() == 6
        assert seeded_db.query(Publisher).count() == 3
        assert seeded_db.query(Author).count() == 4
        assert seeded_db.query(Book).count() == 4
        assert seeded_db.query(BookAuthor).count() == 4
        assert seeded_db.query(BookCopy).count() == 5

    def test_seed_ids_follow_sample_order(self, seeded_db):
        assert seeded_db.get(Book, 1).title == "1984"
        assert seeded_db.get(Book, 4).title == "A Brief History of Time"
        assert seeded_db.get(Book, 2).publisher.publisher_name == "HarperCollins"
        assert seeded_db.get(Book, 2).category.category_name == "Science Fiction"

    def test_seed_copy_statuses(self, seeded_db):
        foundation = get_book_by_isbn(seeded_db, "978-0553293357")
        assert [c.status for c in foundation.copies] == [CopyStatus.CHECKED_OUT]
        hawking = get_book_by_isbn(seeded_db, "978-0553380163")
        assert hawking.copies[0].status.value == "Under Maintenance"

    def test_seed_is_idempotent(self, seeded_db):
        assert seed_sample_data(seeded_db) == 0
        assert seeded_db.query(BookCopy).count() == 5

    def test_failed_seed_commit_rolls_back(self, db, monkeypatch):
        def failing_commit():
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(db, "commit", failing_commit)
        with pytest.raises(SQLAlchemyError):
            seed_sample_data(db)
        monkeypatch.undo()

        assert db.query(Book).count() == 0
        assert db.query(Category).count() == 0
