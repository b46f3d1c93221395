from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, StatementError

from models import Fine, FineReason, Loan, LoanStatus, Member, PaymentStatus, Reservation, ReservationStatus
from Catalog_module.Catalog_crud import add_book_copy
from Catalog_module.Catalog_schema import BookCopyCreate
from Circulation_module.Circulation_crud import (
    create_fine,
    create_loan,
    create_reservation,
    delete_loan,
    get_active_loan_for_copy,
    get_active_reservations_for_book,
    get_fine,
    get_fines_for_member,
)
from Circulation_module.Circulation_schema import FineCreate, LoanCreate, ReservationCreate
from Member_module.Member_crud import delete_member


@pytest.fixture
def copy(db, book):
    return add_book_copy(db, book.book_id, BookCopyCreate())


@pytest.fixture
def loan(db, copy, member):
    return create_loan(db, LoanCreate(
        copy_id=copy.copy_id,
        member_id=member.member_id,
        loan_date=date(2024, 3, 1),
    ))


class TestLoans:
    def test_defaults(self, loan):
        assert loan.loan_status == LoanStatus.ACTIVE
        assert loan.due_date == date(2024, 3, 15)
        assert loan.return_date is None
        assert Decimal(loan.late_fee) == Decimal("0.00")

    def test_status_outside_domain_is_rejected_by_database(self, db, copy, member):
        db.add(Loan(
            copy_id=copy.copy_id,
            member_id=member.member_id,
            loan_date=date(2024, 3, 1),
            due_date=date(2024, 3, 15),
            loan_status="Pending",
        ))
        with pytest.raises(StatementError):
            db.commit()
        db.rollback()

    def test_raw_insert_with_bad_status_is_rejected(self, db, copy, member):
        with pytest.raises(IntegrityError):
            db.execute(text(
                "INSERT INTO loans (copy_id, member_id, loan_date, due_date, loan_status) "
                "VALUES (:copy_id, :member_id, '2024-03-01', '2024-03-15', 'Pending')"
            ), {"copy_id": copy.copy_id, "member_id": member.member_id})
        db.rollback()

    def test_status_outside_domain_is_rejected_by_schema(self, copy, member):
        with pytest.raises(ValidationError):
            LoanCreate(copy_id=copy.copy_id, member_id=member.member_id, loan_status="Pending")

    def test_due_date_before_loan_date_is_rejected(self):
        with pytest.raises(ValidationError):
            LoanCreate(copy_id=1, member_id=1, loan_date=date(2024, 3, 10), due_date=date(2024, 3, 1))

    def test_unknown_copy_is_rejected(self, db, member):
        with pytest.raises(IntegrityError):
            create_loan(db, LoanCreate(copy_id=999, member_id=member.member_id))

    def test_unknown_member_is_rejected(self, db, copy):
        with pytest.raises(IntegrityError):
            create_loan(db, LoanCreate(copy_id=copy.copy_id, member_id=999))

    def test_copy_cannot_be_on_two_open_loans(self, db, loan, copy, member):
        assert get_active_loan_for_copy(db, copy.copy_id).loan_id == loan.loan_id
        with pytest.raises(ValueError):
            create_loan(db, LoanCreate(copy_id=copy.copy_id, member_id=member.member_id))

    def test_overdue_loan_still_holds_the_copy(self, db, loan, copy, member):
        loan.loan_status = LoanStatus.OVERDUE
        db.commit()
        with pytest.raises(ValueError):
            create_loan(db, LoanCreate(copy_id=copy.copy_id, member_id=member.member_id))

    def test_returned_loan_frees_the_copy(self, db, loan, copy, member):
        loan.loan_status = LoanStatus.RETURNED
        loan.return_date = date(2024, 3, 10)
        db.commit()

        assert get_active_loan_for_copy(db, copy.copy_id) is None
        second = create_loan(db, LoanCreate(copy_id=copy.copy_id, member_id=member.member_id))
        assert second.loan_id != loan.loan_id

    def test_historical_returned_loan_can_be_recorded(self, db, loan, copy, member):
        history = create_loan(db, LoanCreate(
            copy_id=copy.copy_id,
            member_id=member.member_id,
            loan_date=date(2023, 1, 1),
            return_date=date(2023, 1, 10),
            loan_status=LoanStatus.RETURNED,
        ))
        assert history.loan_status == LoanStatus.RETURNED

    def test_copy_with_loan_cannot_be_deleted(self, db, loan, copy):
        db.delete(copy)
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_member_with_loan_cannot_be_deleted(self, db, loan, member):
        with pytest.raises(IntegrityError):
            delete_member(db, member.member_id)
        assert db.get(Member, member.member_id) is not None


class TestFines:
    def test_fine_survives_loan_deletion(self, db, loan, member):
        fine = create_fine(db, FineCreate(
            member_id=member.member_id,
            loan_id=loan.loan_id,
            fine_amount=Decimal("4.50"),
            reason=FineReason.LATE_RETURN,
        ))

        assert delete_loan(db, loan.loan_id) is True

        db.expire_all()
        kept = get_fine(db, fine.fine_id)
        assert kept is not None
        assert kept.loan_id is None
        assert kept.payment_status == PaymentStatus.PENDING

    def test_delete_unknown_loan_returns_false(self, db):
        assert delete_loan(db, 999) is False

    def test_fine_without_loan(self, db, member):
        fine = create_fine(db, FineCreate(
            member_id=member.member_id,
            fine_amount=Decimal("10.00"),
            reason="Other",
            description="Lost library card",
        ))
        assert fine.loan_id is None
        assert fine.reason == FineReason.OTHER

    def test_reason_outside_domain_is_rejected(self, member):
        with pytest.raises(ValidationError):
            FineCreate(member_id=member.member_id, fine_amount=Decimal("1.00"), reason="Noise")

    def test_non_positive_amount_is_rejected(self, member):
        with pytest.raises(ValidationError):
            FineCreate(member_id=member.member_id, fine_amount=Decimal("0"), reason="Other")

    def test_paid_date_requires_paid_status(self, member):
        with pytest.raises(ValidationError):
            FineCreate(
                member_id=member.member_id,
                fine_amount=Decimal("1.00"),
                reason="Other",
                paid_date=date(2024, 1, 1),
            )

    def test_fines_listed_newest_first(self, db, member):
        for day in (1, 15, 8):
            create_fine(db, FineCreate(
                member_id=member.member_id,
                fine_amount=Decimal("1.00"),
                fine_date=date(2024, 2, day),
                reason="Other",
            ))
        assert [f.fine_date.day for f in get_fines_for_member(db, member.member_id)] == [15, 8, 1]


class TestReservations:
    def test_defaults(self, db, book, member):
        reservation = create_reservation(db, ReservationCreate(
            book_id=book.book_id,
            member_id=member.member_id,
            reservation_date=datetime(2024, 4, 1, 9, 30),
        ))
        assert reservation.reservation_status == ReservationStatus.ACTIVE
        assert reservation.priority == 1
        assert reservation.expiry_date == date(2024, 4, 8)

    def test_expiry_before_reservation_is_rejected(self, book, member):
        with pytest.raises(ValidationError):
            ReservationCreate(
                book_id=book.book_id,
                member_id=member.member_id,
                reservation_date=datetime(2024, 4, 1),
                expiry_date=date(2024, 3, 1),
            )

    def test_active_queue_orders_by_priority_then_age(self, db, book, member):
        start = datetime(2024, 4, 1, 9, 0)
        late = create_reservation(db, ReservationCreate(
            book_id=book.book_id, member_id=member.member_id, reservation_date=start + timedelta(hours=2)))
        early = create_reservation(db, ReservationCreate(
            book_id=book.book_id, member_id=member.member_id, reservation_date=start))
        urgent = create_reservation(db, ReservationCreate(
            book_id=book.book_id, member_id=member.member_id, reservation_date=start + timedelta(hours=5),
            priority=1))
        late.priority = 2
        early.priority = 2
        cancelled = create_reservation(db, ReservationCreate(
            book_id=book.book_id, member_id=member.member_id, reservation_date=start,
            reservation_status=ReservationStatus.CANCELLED))
        db.commit()

        queue = get_active_reservations_for_book(db, book.book_id)
        assert [r.reservation_id for r in queue] == [urgent.reservation_id, early.reservation_id, late.reservation_id]
        assert cancelled.reservation_id not in [r.reservation_id for r in queue]

    def test_unknown_book_is_rejected(self, db, member):
        with pytest.raises(IntegrityError):
            create_reservation(db, ReservationCreate(book_id=999, member_id=member.member_id))


class TestMemberDeletion:
    def test_reservations_and_fines_go_with_member(self, db, book, member):
        create_reservation(db, ReservationCreate(book_id=book.book_id, member_id=member.member_id))
        create_fine(db, FineCreate(member_id=member.member_id, fine_amount=Decimal("2.00"), reason="Other"))
        member_id = member.member_id

        assert delete_member(db, member_id) is True

        assert db.query(Reservation).filter(Reservation.member_id == member_id).count() == 0
        assert db.query(Fine).filter(Fine.member_id == member_id).count() == 0
