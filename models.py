"""
Registers every mapped class with Base.metadata.

Relationships between modules are declared by class name, so the mappers can
only be configured once all of them are imported. Import this module (not the
individual model files) wherever the full schema is needed.
"""
from database import Base
from Member_module.Member_model import Member, MembershipStatus
from Catalog_module.Catalog_model import Author, Publisher, Category, Book, BookAuthor
from Catalog_module.Copy_model import BookCopy, CopyStatus
from Circulation_module.Loan_model import Loan, LoanStatus, OPEN_LOAN_STATUSES
from Circulation_module.Reservation_model import Reservation, ReservationStatus
from Circulation_module.Fine_model import Fine, FineReason, PaymentStatus
from Staff_module.Staff_model import Staff, StaffStatus
from Audit_module.Audit_log_model import AuditLog, AuditAction

# Foreign-key declaration order; also the order tables are reported in
EXPECTED_TABLES = {
    "members": Member,
    "authors": Author,
    "publishers": Publisher,
    "categories": Category,
    "books": Book,
    "book_authors": BookAuthor,
    "book_copies": BookCopy,
    "loans": Loan,
    "reservations": Reservation,
    "fines": Fine,
    "staff": Staff,
    "audit_log": AuditLog,
}

__all__ = [
    "Base",
    "Member", "MembershipStatus",
    "Author", "Publisher", "Category", "Book", "BookAuthor",
    "BookCopy", "CopyStatus",
    "Loan", "LoanStatus", "OPEN_LOAN_STATUSES",
    "Reservation", "ReservationStatus",
    "Fine", "FineReason", "PaymentStatus",
    "Staff", "StaffStatus",
    "AuditLog", "AuditAction",
    "EXPECTED_TABLES",
]
