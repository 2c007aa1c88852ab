from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from fastapi.responses import FileResponse, JSONResponse

from company_registry.core.settings import settings
from company_registry.core.logging import configure_logging
from company_registry.core.exception_handlers import setup_exception_handlers
from company_registry.core.security import require_auth

from company_registry.api.auth import router as auth_router
from company_registry.api.company import router as company_router

VERSION = "1.0.0"
STATIC_DIR = Path(__file__).resolve().parent / "static"

configure_logging(settings.LOG_LEVEL)

DOCS_PROTECTED = settings.ENV == "prod" or bool(settings.AUTH_PROTECT_DOCS)
DOC_DEPS = [Depends(require_auth)] if DOCS_PROTECTED else []

app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    description="Companies owned by authenticated users, keyed by a unique 12-character INN.",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

setup_exception_handlers(app)

# login/register must stay reachable without a token
app.include_router(auth_router)
app.include_router(company_router, prefix=settings.API_PREFIX)


@app.get("/health")
def health():
    return {
        "ok": True,
        "service": "company-registry",
        "env": settings.ENV,
        "version": VERSION,
        "build": settings.BUILD_SHA or None,
        "docs_protected": bool(DOCS_PROTECTED),
    }


@app.get("/dashboard", include_in_schema=False)
def dashboard():
    return FileResponse(STATIC_DIR / "dashboard.html", media_type="text/html")


# Docs/OpenAPI always exist; when DOCS_PROTECTED they require a JWT
@app.get("/openapi.json", include_in_schema=False, dependencies=DOC_DEPS)
def openapi_json():
    schema = get_openapi(title=app.title, version=app.version, description=app.description, routes=app.routes)
    return JSONResponse(schema)


@app.get("/docs", include_in_schema=False, dependencies=DOC_DEPS)
def swagger_docs():
    return get_swagger_ui_html(openapi_url="/openapi.json", title=f"{app.title} - Docs")


@app.get("/redoc", include_in_schema=False, dependencies=DOC_DEPS)
def redoc_docs():
    return get_redoc_html(openapi_url="/openapi.json", title=f"{app.title} - ReDoc")
