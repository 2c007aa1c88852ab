from datetime import datetime, timezone

from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator
from pydantic_core import PydanticCustomError

INN_LENGTH = 12


class CompanyCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    inn: str = Field(
        examples=["123456789012"],
        json_schema_extra={"minLength": INN_LENGTH, "maxLength": INN_LENGTH},
    )
    title: str = Field(min_length=1, max_length=255, examples=["My Company"])

    # too short and too long share one message
    @field_validator("inn")
    @classmethod
    def _inn_size(cls, v: str) -> str:
        if len(v) != INN_LENGTH:
            raise PydanticCustomError(
                "string_size",
                "String should have exactly {size} characters",
                {"size": INN_LENGTH},
            )
        return v


class CompanyUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255, examples=["Updated Company Title"])


class CompanyOut(BaseModel):
    id: str
    inn: str
    title: str
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    # SQLite drops tzinfo on read; stored values are always UTC
    @field_serializer("created_at", "updated_at")
    def _as_utc(self, value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


class ErrorOut(BaseModel):
    error: str
