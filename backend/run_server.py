import uvicorn

from company_registry.core.settings import settings


if __name__ == "__main__":
    uvicorn.run(
        "company_registry.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENV != "prod",
        log_config=None,  # company_registry.core.logging owns the root logger
    )
