from sqlalchemy import (
    Column, Integer, String, Text, Date, TIMESTAMP, Numeric, Enum, ForeignKey, Index, UniqueConstraint, text
)
from sqlalchemy.orm import relationship
from database import Base, enum_values
import enum


class CopyStatus(str, enum.Enum):
    AVAILABLE = "Available"
    CHECKED_OUT = "Checked Out"
    LOST = "Lost"
    DAMAGED = "Damaged"
    UNDER_MAINTENANCE = "Under Maintenance"


class BookCopy(Base):
    """A physical copy of a book, tracked on its own."""
    __tablename__ = "book_copies"

    copy_id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="CASCADE"), nullable=False)
    copy_number = Column(Integer, nullable=False)
    acquisition_date = Column(Date, nullable=False)
    price = Column(Numeric(10, 2), nullable=True)
    status = Column(
        Enum(CopyStatus, name="copy_status", values_callable=enum_values, create_constraint=True),
        default=CopyStatus.AVAILABLE,
        server_default=CopyStatus.AVAILABLE.value,
    )
    location = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    book = relationship("Book", back_populates="copies")
    # RESTRICT: a copy with loan history cannot be deleted directly
    loans = relationship("Loan", back_populates="copy", passive_deletes="all")

    __table_args__ = (
        UniqueConstraint("book_id", "copy_number", name="unique_book_copy"),
        Index("idx_book_copies_status", "status"),
    )
