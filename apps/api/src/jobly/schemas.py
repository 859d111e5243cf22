from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobly.models import EQUITY_SCALE, INTEGER_MAX


def _check_equity_scale(value: float | None) -> float | None:
    if value is not None and round(value, EQUITY_SCALE) != value:
        raise ValueError(f"equity allows at most {EQUITY_SCALE} decimal places")
    return value


class JobFilterParams(BaseModel):
    """Query-string filters for GET /jobs, coerced from their string form."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    min_salary: int | None = Field(default=None, alias="minSalary", ge=0, le=INTEGER_MAX)
    has_equity: bool | None = Field(default=None, alias="hasEquity")

    def to_filters(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class JobCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    title: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0, le=INTEGER_MAX)
    equity: float | None = Field(default=None, ge=0, le=1)
    company_handle: str = Field(alias="companyHandle", min_length=1, max_length=25)

    @field_validator("equity")
    @classmethod
    def check_equity_scale(cls, value: float | None) -> float | None:
        return _check_equity_scale(value)


class JobUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0, le=INTEGER_MAX)
    equity: float | None = Field(default=None, ge=0, le=1)

    @field_validator("equity")
    @classmethod
    def check_equity_scale(cls, value: float | None) -> float | None:
        return _check_equity_scale(value)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value: str | None) -> str:
        # omitted means "unchanged"; an explicit null would clear a NOT NULL column
        if value is None:
            raise ValueError("title may not be null")
        return value


class JobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    salary: int | None = None
    equity: float | None = None
    company_handle: str = Field(serialization_alias="companyHandle")
