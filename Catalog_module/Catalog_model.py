from sqlalchemy import Column, Integer, SmallInteger, String, Text, Date, TIMESTAMP, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from database import Base, YearType


class Author(Base):
    __tablename__ = "authors"

    author_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    birth_date = Column(Date, nullable=True)
    nationality = Column(String(50), nullable=True)
    biography = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    book_authors = relationship(
        "BookAuthor", back_populates="author", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("idx_authors_name", "last_name", "first_name"),
    )


class Publisher(Base):
    __tablename__ = "publishers"

    publisher_id = Column(Integer, primary_key=True, autoincrement=True)
    publisher_name = Column(String(100), nullable=False, unique=True)
    address = Column(Text, nullable=True)
    contact_email = Column(String(100), nullable=True)
    contact_phone = Column(String(15), nullable=True)
    # MySQL YEAR stops at 1901; founding years such as 1817 need a plain integer
    established_year = Column(SmallInteger, nullable=True)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    # RESTRICT: the database refuses the delete while books reference it
    books = relationship("Book", back_populates="publisher", passive_deletes="all")


class Category(Base):
    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    category_name = Column(String(50), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    parent_category_id = Column(
        Integer, ForeignKey("categories.category_id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    parent = relationship("Category", remote_side=[category_id], back_populates="children")
    children = relationship("Category", back_populates="parent", passive_deletes=True)
    books = relationship("Book", back_populates="category", passive_deletes="all")


class Book(Base):
    __tablename__ = "books"

    book_id = Column(Integer, primary_key=True, autoincrement=True)
    isbn = Column(String(20), nullable=False, unique=True)
    title = Column(String(200), nullable=False)
    edition = Column(String(20), nullable=True)
    publication_year = Column(YearType, nullable=True)
    publisher_id = Column(Integer, ForeignKey("publishers.publisher_id", ondelete="RESTRICT"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.category_id", ondelete="RESTRICT"), nullable=False)
    pages = Column(Integer, nullable=True)
    language = Column(String(30), default="English", server_default="English")
    description = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    publisher = relationship("Publisher", back_populates="books")
    category = relationship("Category", back_populates="books")

    book_authors = relationship(
        "BookAuthor",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BookAuthor.author_order",
    )
    authors = relationship(
        "Author", secondary="book_authors", order_by="BookAuthor.author_order", viewonly=True
    )
    copies = relationship(
        "BookCopy",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BookCopy.copy_number",
    )
    reservations = relationship(
        "Reservation", back_populates="book", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("idx_books_title", "title"),
    )


class BookAuthor(Base):
    """Many-to-many link between books and authors; rows go with either side."""
    __tablename__ = "book_authors"

    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="CASCADE"), primary_key=True)
    author_id = Column(Integer, ForeignKey("authors.author_id", ondelete="CASCADE"), primary_key=True)
    author_order = Column(Integer, default=1, server_default="1")

    book = relationship("Book", back_populates="book_authors")
    author = relationship("Author", back_populates="book_authors")
