import secrets

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, model_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Company Registry API"
    ENV: str = Field(default="lab", validation_alias=AliasChoices("COMPANY_REGISTRY_ENV","ENV"))  # lab|prod
    DATABASE_URL: str = Field(default="sqlite:///./lab.db", validation_alias=AliasChoices("COMPANY_REGISTRY_DATABASE_URL","DATABASE_URL"))
    API_PREFIX: str = Field(default="/api", validation_alias=AliasChoices("COMPANY_REGISTRY_API_PREFIX","API_PREFIX"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("COMPANY_REGISTRY_LOG_LEVEL","LOG_LEVEL"))

    # Auth (JWT)
    AUTH_PROTECT_DOCS: bool = Field(default=False, validation_alias=AliasChoices("COMPANY_REGISTRY_AUTH_PROTECT_DOCS","AUTH_PROTECT_DOCS"))
    AUTH_JWT_SECRET: str = Field(default="", validation_alias=AliasChoices("COMPANY_REGISTRY_AUTH_JWT_SECRET","AUTH_JWT_SECRET","JWT_SECRET"))
    AUTH_JWT_EXPIRE_MINUTES: int = Field(default=60, validation_alias=AliasChoices("COMPANY_REGISTRY_AUTH_JWT_EXPIRE_MINUTES","AUTH_JWT_EXPIRE_MINUTES"))
    BUILD_SHA: str = Field(default="", validation_alias=AliasChoices("COMPANY_REGISTRY_BUILD_SHA","BUILD_SHA","GITHUB_SHA"))

    @model_validator(mode="after")
    def _security_invariants(self):
        sec = (self.AUTH_JWT_SECRET or "").strip()

        if self.ENV == "prod":
            if not sec:
                raise ValueError("SECURITY: AUTH_JWT_SECRET is required when ENV=prod")
            if len(sec) < 32:
                raise ValueError("SECURITY: AUTH_JWT_SECRET too short (min 32 chars)")

        # lab: tokens only need to survive for the lifetime of the process
        if not sec:
            sec = secrets.token_urlsafe(48)

        self.AUTH_JWT_SECRET = sec
        prefix = (self.API_PREFIX or "").strip("/")
        self.API_PREFIX = f"/{prefix}" if prefix else ""
        return self

settings = Settings()
