from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
import logging

from company_registry.db import get_db
from company_registry.core.errors import CompanyConflictError, CompanyForbiddenError, CompanyNotFoundError
from company_registry.core.security import get_current_user_id
from company_registry.models.company import Company
from company_registry.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate, ErrorOut
from company_registry.services import company_store

router = APIRouter(prefix="/companies", tags=["companies"])

logger = logging.getLogger(__name__)

_FORBIDDEN = {403: {"model": ErrorOut, "description": "Unauthorized"}}
_NOT_FOUND = {404: {"model": ErrorOut, "description": "Company not found"}}


def _owned_company(db: Session, company_id: str, user_id: int) -> Company:
    c = company_store.find_active_by_id(db, company_id)
    if not c:
        raise CompanyNotFoundError()
    if c.user_id != user_id:
        logger.warning("Rejected non-owner access", extra={"company_id": c.id, "user_id": user_id})
        raise CompanyForbiddenError()
    return c


@router.get("", response_model=list[CompanyOut])
def list_companies(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Companies owned by the authenticated user."""
    return company_store.find_active_by_owner(db, user_id)


@router.post(
    "",
    response_model=CompanyOut,
    status_code=201,
    responses={409: {"model": ErrorOut, "description": "Company with this INN already exists"}},
)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Create a company owned by the authenticated user.

    A soft-deleted company with the same INN is restored under the new
    title instead; it keeps its id and its original owner.
    """
    existing = company_store.find_by_inn_including_deleted(db, payload.inn)
    if existing is None:
        return company_store.create(db, payload.inn, payload.title, user_id)

    if existing.is_deleted:
        return company_store.restore(db, existing, payload.title)

    raise CompanyConflictError()


async def _raw_body(request: Request) -> bytes:
    # read unparsed so a bad body cannot short-circuit the ownership check
    return await request.body()


@router.put(
    "/{company_id}",
    response_model=CompanyOut,
    responses={**_FORBIDDEN, **_NOT_FOUND},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": CompanyUpdate.model_json_schema(),
                    "example": {"title": "Updated Company Title"},
                }
            },
        }
    },
)
def update_company(
    company_id: str,
    raw_body: bytes = Depends(_raw_body),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Rename a company. Only its owner may do so."""
    c = _owned_company(db, company_id, user_id)

    # ownership is checked before the body is parsed or validated
    try:
        data = CompanyUpdate.model_validate_json(raw_body or b"{}")
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    return company_store.update_title(db, c, data.title)


@router.delete("/{company_id}", status_code=204, responses={**_FORBIDDEN, **_NOT_FOUND})
def delete_company(company_id: str, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Soft-delete a company. Only its owner may do so."""
    c = _owned_company(db, company_id, user_id)
    company_store.soft_delete(db, c)
    return Response(status_code=204)
