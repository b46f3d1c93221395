import logging
from typing import Optional

from sqlalchemy.orm import Session

import models  # noqa: F401  registers every mapped class
from database import commit_and_refresh
from .Member_model import Member
from .Member_schema import MemberCreate, MemberUpdate

logger = logging.getLogger(__name__)


def create_member(db: Session, member_data: MemberCreate) -> Member:
    member = Member(**member_data.model_dump())
    db.add(member)
    commit_and_refresh(db, member, "create member")
    logger.info(f"Member created | Member ID: {member.member_id} | Email: {member.email}")
    return member


def get_member(db: Session, member_id: int) -> Optional[Member]:
    return db.query(Member).filter(Member.member_id == member_id).first()


def get_member_by_email(db: Session, email: str) -> Optional[Member]:
    return db.query(Member).filter(Member.email == email.strip().lower()).first()


def update_member(db: Session, member_id: int, member_data: MemberUpdate) -> Optional[Member]:
    member = get_member(db, member_id)
    if member is None:
        return None

    for key, value in member_data.model_dump(exclude_unset=True).items():
        setattr(member, key, value)

    return commit_and_refresh(db, member, f"update member {member_id}")


def delete_member(db: Session, member_id: int) -> bool:
    """
    Delete a member. Reservations and fines are removed with the member;
    any loan on record blocks the delete with an IntegrityError.
    """
    member = get_member(db, member_id)
    if member is None:
        return False
    db.delete(member)
    commit_and_refresh(db, None, f"delete member {member_id}")
    logger.info(f"Member deleted | Member ID: {member_id}")
    return True
