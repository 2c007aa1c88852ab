"""
Company record store.

Explicit operations over the `companies` table. Every mutating operation
commits its own unit of work and returns the refreshed row; nothing is
persisted implicitly by assigning attributes elsewhere.

Uniqueness of `inn` is enforced by the storage constraint. The lookup in
the create flow only picks a branch: a constraint violation on insert, or a
restore that finds the row already active, is reported as a conflict.
"""
from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from company_registry.core.errors import CompanyConflictError
from company_registry.models.company import Company, utcnow

logger = logging.getLogger(__name__)


def _active():
    return Company.deleted_at.is_(None)


def find_active_by_owner(db: Session, owner_id: int) -> list[Company]:
    q = (
        select(Company)
        .where(Company.user_id == owner_id)
        .where(_active())
        .order_by(Company.created_at, Company.id)
    )
    return list(db.scalars(q))


def find_by_inn_including_deleted(db: Session, inn: str) -> Company | None:
    # UNIQUE(inn) guarantees at most one row
    return db.scalar(select(Company).where(Company.inn == inn))


def find_active_by_id(db: Session, company_id: str) -> Company | None:
    return db.scalar(select(Company).where(Company.id == company_id).where(_active()))


def create(db: Session, inn: str, title: str, owner_id: int) -> Company:
    now = utcnow()
    c = Company(inn=inn, title=title, user_id=owner_id, created_at=now, updated_at=now)
    db.add(c)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("INN conflict on insert", extra={"inn": inn, "user_id": owner_id})
        raise CompanyConflictError()
    db.refresh(c)
    logger.info("Company created", extra={"company_id": c.id, "user_id": owner_id})
    return c


def restore(db: Session, existing: Company, new_title: str) -> Company:
    """
    Bring a soft-deleted company back with a new title.

    The owner is left as it was. Only a row that is still soft-deleted is
    touched, so two concurrent restores cannot both succeed.
    """
    result = db.execute(
        update(Company)
        .where(Company.id == existing.id)
        .where(Company.deleted_at.is_not(None))
        .values(deleted_at=None, title=new_title, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Restore lost to a concurrent request", extra={"company_id": existing.id})
        raise CompanyConflictError()
    db.commit()
    db.refresh(existing)
    logger.info("Company restored", extra={"company_id": existing.id, "user_id": existing.user_id})
    return existing


def update_title(db: Session, company: Company, new_title: str) -> Company:
    company.title = new_title
    company.updated_at = utcnow()
    db.commit()
    db.refresh(company)
    logger.info("Company updated", extra={"company_id": company.id, "user_id": company.user_id})
    return company


def soft_delete(db: Session, company: Company) -> None:
    now = utcnow()
    company.deleted_at = now
    company.updated_at = now
    db.commit()
    logger.info("Company soft-deleted", extra={"company_id": company.id, "user_id": company.user_id})
