from sqlalchemy import Column, Integer, Text, Date, TIMESTAMP, Numeric, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from database import Base, enum_values
import enum


class FineReason(str, enum.Enum):
    LATE_RETURN = "Late Return"
    BOOK_DAMAGE = "Book Damage"
    BOOK_LOST = "Book Lost"
    OTHER = "Other"


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"
    WAIVED = "Waived"


class Fine(Base):
    __tablename__ = "fines"

    fine_id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("members.member_id", ondelete="CASCADE"), nullable=False)
    loan_id = Column(Integer, ForeignKey("loans.loan_id", ondelete="SET NULL"), nullable=True)
    fine_amount = Column(Numeric(8, 2), nullable=False)
    fine_date = Column(Date, nullable=False)
    reason = Column(
        Enum(FineReason, name="fine_reason", values_callable=enum_values, create_constraint=True),
        nullable=False,
    )
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status", values_callable=enum_values, create_constraint=True),
        default=PaymentStatus.PENDING,
        server_default=PaymentStatus.PENDING.value,
    )
    paid_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    member = relationship("Member", back_populates="fines")
    loan = relationship("Loan", back_populates="fines")

    __table_args__ = (
        Index("idx_fines_status", "payment_status"),
    )
