import logging
from typing import List, Optional

from sqlalchemy.orm import Session

import models  # noqa: F401  registers every mapped class
from database import commit_and_refresh
from .Loan_model import Loan, OPEN_LOAN_STATUSES
from .Reservation_model import Reservation, ReservationStatus
from .Fine_model import Fine
from .Circulation_schema import LoanCreate, ReservationCreate, FineCreate

logger = logging.getLogger(__name__)


def get_active_loan_for_copy(db: Session, copy_id: int) -> Optional[Loan]:
    """Return the loan currently holding the copy (Active or Overdue), if any."""
    return (
        db.query(Loan)
        .filter(
            Loan.copy_id == copy_id,
            Loan.loan_status.in_(OPEN_LOAN_STATUSES),
        )
        .first()
    )


def create_loan(db: Session, loan_data: LoanCreate) -> Loan:
    """
    Record a loan. A copy can only be out on one open loan at a time; that
    rule lives here rather than in the schema.
    """
    if loan_data.loan_status in OPEN_LOAN_STATUSES:
        existing = get_active_loan_for_copy(db, loan_data.copy_id)
        if existing is not None:
            logger.warning(
                f"Loan rejected | Copy ID: {loan_data.copy_id} already on loan {existing.loan_id}"
            )
            raise ValueError(f"Copy {loan_data.copy_id} is already on loan (loan {existing.loan_id})")

    loan = Loan(**loan_data.model_dump())
    db.add(loan)
    commit_and_refresh(db, loan, f"create loan for copy {loan_data.copy_id}")
    logger.info(
        f"Loan created | Loan ID: {loan.loan_id} | Copy ID: {loan.copy_id} | "
        f"Member ID: {loan.member_id} | Due: {loan.due_date}"
    )
    return loan


def get_loan(db: Session, loan_id: int) -> Optional[Loan]:
    return db.query(Loan).filter(Loan.loan_id == loan_id).first()


def delete_loan(db: Session, loan_id: int) -> bool:
    """Fines raised against the loan are kept, with loan_id set to NULL."""
    loan = get_loan(db, loan_id)
    if loan is None:
        return False
    db.delete(loan)
    commit_and_refresh(db, None, f"delete loan {loan_id}")
    logger.info(f"Loan deleted | Loan ID: {loan_id}")
    return True


def create_reservation(db: Session, reservation_data: ReservationCreate) -> Reservation:
    reservation = Reservation(**reservation_data.model_dump())
    db.add(reservation)
    commit_and_refresh(db, reservation, f"create reservation for book {reservation_data.book_id}")
    logger.info(
        f"Reservation created | Reservation ID: {reservation.reservation_id} | "
        f"Book ID: {reservation.book_id} | Member ID: {reservation.member_id}"
    )
    return reservation


def get_active_reservations_for_book(db: Session, book_id: int) -> List[Reservation]:
    """Active holds on a title, highest priority (lowest number) first, then oldest."""
    return (
        db.query(Reservation)
        .filter(
            Reservation.book_id == book_id,
            Reservation.reservation_status == ReservationStatus.ACTIVE,
        )
        .order_by(Reservation.priority.asc(), Reservation.reservation_date.asc())
        .all()
    )


def create_fine(db: Session, fine_data: FineCreate) -> Fine:
    fine = Fine(**fine_data.model_dump())
    db.add(fine)
    commit_and_refresh(db, fine, f"create fine for member {fine_data.member_id}")
    logger.info(
        f"Fine created | Fine ID: {fine.fine_id} | Member ID: {fine.member_id} | "
        f"Amount: {fine.fine_amount} | Reason: {fine.reason.value}"
    )
    return fine


def get_fine(db: Session, fine_id: int) -> Optional[Fine]:
    return db.query(Fine).filter(Fine.fine_id == fine_id).first()


def get_fines_for_member(db: Session, member_id: int) -> List[Fine]:
    return (
        db.query(Fine)
        .filter(Fine.member_id == member_id)
        .order_by(Fine.fine_date.desc())
        .all()
    )
