"""
Audit log model - append-only history of changes to library records.
"""
from sqlalchemy import Column, Integer, String, TIMESTAMP, JSON, Enum, ForeignKey, text
from sqlalchemy.orm import relationship
from database import Base, enum_values
import enum


class AuditAction(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditLog(Base):
    """
    One row per change. table_name/record_id identify the audited row but are
    not a foreign key, so entries survive deletion of the row they describe.
    """
    __tablename__ = "audit_log"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    table_name = Column(String(50), nullable=False)
    record_id = Column(Integer, nullable=False)
    action = Column(
        Enum(AuditAction, name="audit_action", values_callable=enum_values, create_constraint=True),
        nullable=False,
    )
    old_values = Column(JSON(none_as_null=True), nullable=True)  # Snapshot before the change
    new_values = Column(JSON(none_as_null=True), nullable=True)  # Snapshot after the change
    staff_id = Column(Integer, ForeignKey("staff.staff_id", ondelete="SET NULL"), nullable=True)
    change_timestamp = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    staff = relationship("Staff", back_populates="audit_entries")
