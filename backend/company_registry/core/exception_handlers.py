import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from company_registry.core.errors import CompanyRegistryError

logger = logging.getLogger(__name__)

# request locations that are not field names
_LOC_PREFIXES = {"body", "query", "path", "header", "cookie"}

_MESSAGES = {
    "missing": "The {field} field is required.",
    "string_type": "The {field} field must be a string.",
    "string_too_short": "The {field} field must be at least {min_length} characters.",
    "string_too_long": "The {field} field must not be greater than {max_length} characters.",
    "string_size": "The {field} field must be {size} characters.",
}


def _field_name(loc) -> str:
    # list indexes (e.g. the offset of a JSON decode error) are not field names
    parts = [p for p in loc if isinstance(p, str) and p not in _LOC_PREFIXES]
    return ".".join(parts) or "body"


def _message(err: dict, field: str) -> str:
    ctx = err.get("ctx") or {}
    label = field.replace("_", " ")
    # blank strings are stripped before the length check
    if err.get("type") == "string_too_short" and ctx.get("min_length") == 1:
        return _MESSAGES["missing"].format(field=label)
    template = _MESSAGES.get(err.get("type", ""))
    if template:
        return template.format(field=label, **ctx)
    return str(err.get("msg", "Invalid value"))


def validation_error_body(errors) -> dict:
    """Collapse pydantic error dicts into `{"message", "errors": {field: [msg, ...]}}`."""
    fields: dict[str, list[str]] = {}
    for err in errors:
        field = _field_name(err.get("loc", ()))
        fields.setdefault(field, []).append(_message(err, field))

    first = next(iter(fields.values()), ["The given data was invalid."])[0]
    return {"message": first, "errors": fields}


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(CompanyRegistryError)
    async def registry_error_handler(request: Request, exc: CompanyRegistryError):
        return JSONResponse(content={"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content=validation_error_body(exc.errors()),
            status_code=422,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("DB error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            content={"error": "Database unavailable"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
