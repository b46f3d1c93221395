from sqlalchemy import Column, Integer, Date, TIMESTAMP, Numeric, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from database import Base, enum_values
import enum


class LoanStatus(str, enum.Enum):
    ACTIVE = "Active"
    RETURNED = "Returned"
    OVERDUE = "Overdue"


# Statuses under which the copy is still out with the member
OPEN_LOAN_STATUSES = (LoanStatus.ACTIVE, LoanStatus.OVERDUE)


class Loan(Base):
    __tablename__ = "loans"

    loan_id = Column(Integer, primary_key=True, autoincrement=True)
    copy_id = Column(Integer, ForeignKey("book_copies.copy_id", ondelete="RESTRICT"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.member_id", ondelete="RESTRICT"), nullable=False)
    loan_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=True)
    late_fee = Column(Numeric(8, 2), default=0, server_default="0.00")
    loan_status = Column(
        Enum(LoanStatus, name="loan_status", values_callable=enum_values, create_constraint=True),
        default=LoanStatus.ACTIVE,
        server_default=LoanStatus.ACTIVE.value,
    )
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    copy = relationship("BookCopy", back_populates="loans")
    member = relationship("Member", back_populates="loans")
    # SET NULL: fines outlive the loan they were raised against
    fines = relationship("Fine", back_populates="loan", passive_deletes=True)

    __table_args__ = (
        Index("idx_loans_member_status", "member_id", "loan_status"),
        Index("idx_loans_due_date", "due_date"),
    )
