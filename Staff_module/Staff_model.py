from sqlalchemy import Column, Integer, String, Date, TIMESTAMP, Numeric, Enum, text
from sqlalchemy.orm import relationship
from database import Base, enum_values
import enum


class StaffStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Staff(Base):
    __tablename__ = "staff"

    staff_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True)
    phone = Column(String(15), nullable=True)
    position = Column(String(50), nullable=False)
    hire_date = Column(Date, nullable=False)
    salary = Column(Numeric(10, 2), nullable=True)
    status = Column(
        Enum(StaffStatus, name="staff_status", values_callable=enum_values, create_constraint=True),
        default=StaffStatus.ACTIVE,
        server_default=StaffStatus.ACTIVE.value,
    )
    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    # Audit entries keep their history when the staff row goes (SET NULL)
    audit_entries = relationship("AuditLog", back_populates="staff", passive_deletes=True)
