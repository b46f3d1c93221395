from sqlalchemy import Column, Integer, String, Text, Date, TIMESTAMP, Enum, Index, DDL, FetchedValue, event, text
from sqlalchemy.orm import relationship
from database import Base, enum_values
import enum


class MembershipStatus(str, enum.Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    EXPIRED = "Expired"


class Member(Base):
    __tablename__ = "members"

    member_id = Column(Integer, primary_key=True, autoincrement=True)
    national_id = Column(String(20), nullable=False, unique=True)

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True)
    phone = Column(String(15), nullable=True)
    address = Column(Text, nullable=True)

    membership_date = Column(Date, nullable=False)
    membership_status = Column(
        Enum(MembershipStatus, name="membership_status", values_callable=enum_values, create_constraint=True),
        default=MembershipStatus.ACTIVE,
        server_default=MembershipStatus.ACTIVE.value,
    )
    max_books_allowed = Column(Integer, default=5, server_default="5")

    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    # Refreshed by the database on every UPDATE (see MEMBERS_UPDATED_AT_DDL)
    updated_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), server_onupdate=FetchedValue())

    # Loans block member deletion (RESTRICT); reservations and fines go with the member
    loans = relationship("Loan", back_populates="member", passive_deletes="all")
    reservations = relationship(
        "Reservation", back_populates="member", cascade="all, delete-orphan", passive_deletes=True
    )
    fines = relationship("Fine", back_populates="member", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index("idx_members_email", "email"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


# updated_at follows any UPDATE that does not set it explicitly, including
# raw SQL issued outside the ORM. Keep in step with 001_initial_schema.
MEMBERS_UPDATED_AT_DDL = {
    "mysql": [
        "ALTER TABLE members MODIFY updated_at TIMESTAMP NULL "
        "DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
    ],
    "sqlite": [
        "CREATE TRIGGER trg_members_updated_at AFTER UPDATE ON members "
        "FOR EACH ROW WHEN NEW.updated_at IS OLD.updated_at "
        "BEGIN "
        "UPDATE members SET updated_at = CURRENT_TIMESTAMP WHERE member_id = NEW.member_id; "
        "END",
    ],
    "postgresql": [
        "CREATE OR REPLACE FUNCTION set_members_updated_at() RETURNS TRIGGER AS $$ "
        "BEGIN "
        "IF NEW.updated_at IS NOT DISTINCT FROM OLD.updated_at THEN "
        "NEW.updated_at = CURRENT_TIMESTAMP; "
        "END IF; "
        "RETURN NEW; "
        "END; "
        "$$ LANGUAGE plpgsql",
        "CREATE TRIGGER trg_members_updated_at BEFORE UPDATE ON members "
        "FOR EACH ROW EXECUTE FUNCTION set_members_updated_at()",
    ],
}

for _dialect, _statements in MEMBERS_UPDATED_AT_DDL.items():
    for _statement in _statements:
        event.listen(Member.__table__, "after_create", DDL(_statement).execute_if(dialect=_dialect))

event.listen(
    Member.__table__,
    "after_drop",
    DDL("DROP FUNCTION IF EXISTS set_members_updated_at()").execute_if(dialect="postgresql"),
)
