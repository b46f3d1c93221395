import logging
from typing import Optional

from sqlalchemy.orm import Session

import models  # noqa: F401  registers every mapped class
from database import commit_and_refresh
from .Staff_model import Staff
from .Staff_schema import StaffCreate

logger = logging.getLogger(__name__)


def create_staff(db: Session, staff_data: StaffCreate) -> Staff:
    staff = Staff(**staff_data.model_dump())
    db.add(staff)
    commit_and_refresh(db, staff, "create staff member")
    logger.info(f"Staff created | Staff ID: {staff.staff_id} | Position: {staff.position}")
    return staff


def get_staff_by_email(db: Session, email: str) -> Optional[Staff]:
    return db.query(Staff).filter(Staff.email == email.strip().lower()).first()


def delete_staff(db: Session, staff_id: int) -> bool:
    """Audit entries written by this staff member stay, with staff_id set to NULL."""
    staff = db.query(Staff).filter(Staff.staff_id == staff_id).first()
    if staff is None:
        return False
    db.delete(staff)
    commit_and_refresh(db, None, f"delete staff {staff_id}")
    return True
