from sqlalchemy import Column, Integer, Date, DateTime, TIMESTAMP, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from database import Base, enum_values
import enum


class ReservationStatus(str, enum.Enum):
    ACTIVE = "Active"
    FULFILLED = "Fulfilled"
    CANCELLED = "Cancelled"


class Reservation(Base):
    """A hold placed on a title (not on a specific copy)."""
    __tablename__ = "reservations"

    reservation_id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="CASCADE"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.member_id", ondelete="CASCADE"), nullable=False)
    reservation_date = Column(DateTime, nullable=False)
    reservation_status = Column(
        Enum(ReservationStatus, name="reservation_status", values_callable=enum_values, create_constraint=True),
        default=ReservationStatus.ACTIVE,
        server_default=ReservationStatus.ACTIVE.value,
    )
    priority = Column(Integer, default=1, server_default="1")
    expiry_date = Column(Date, nullable=False)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    book = relationship("Book", back_populates="reservations")
    member = relationship("Member", back_populates="reservations")

    __table_args__ = (
        Index("idx_reservations_status", "reservation_status"),
    )
