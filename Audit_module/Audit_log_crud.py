from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any, Union
from datetime import date, datetime
from decimal import Decimal
import enum
import logging

import models  # noqa: F401  registers every mapped class
from database import commit_and_refresh
from .Audit_log_model import AuditLog, AuditAction

logger = logging.getLogger(__name__)


def record_audit_event(
    db: Session,
    table_name: str,
    record_id: int,
    action: Union[AuditAction, str],
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    staff_id: Optional[int] = None
) -> AuditLog:
    """
    Append an audit log entry.

    Args:
        db: Database session
        table_name: Table the change was made to (e.g. "loans")
        record_id: Primary key of the changed row
        action: INSERT, UPDATE or DELETE
        old_values: Row snapshot before the change (None for INSERT)
        new_values: Row snapshot after the change (None for DELETE)
        staff_id: Staff member responsible, if known
    """
    entry = AuditLog(
        table_name=table_name,
        record_id=record_id,
        action=AuditAction(action),
        old_values=old_values,
        new_values=new_values,
        staff_id=staff_id
    )

    db.add(entry)
    commit_and_refresh(db, entry, f"write audit entry for {table_name}#{record_id}")
    logger.debug(f"Audit entry | {entry.action.value} {table_name}#{record_id} | Staff ID: {staff_id}")

    return entry


def get_audit_trail(
    db: Session,
    table_name: str,
    record_id: int,
    limit: int = 100
):
    """
    History of one record, oldest first.
    """
    return db.query(AuditLog).filter(
        AuditLog.table_name == table_name,
        AuditLog.record_id == record_id
    ).order_by(AuditLog.change_timestamp.asc(), AuditLog.log_id.asc()).limit(limit).all()


def row_snapshot(instance) -> Dict[str, Any]:
    """JSON-safe dict of a mapped row's column values, for old_values/new_values."""
    snapshot = {}
    for column in sa_inspect(instance).mapper.column_attrs:
        value = getattr(instance, column.key)
        if isinstance(value, enum.Enum):
            value = value.value
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = str(value)
        snapshot[column.key] = value
    return snapshot
