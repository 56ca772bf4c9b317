from pydantic import BaseModel, Field, field_validator
from typing import Optional

# Decimal fraction between 0 and 1 inclusive, e.g. "0", "0.25", "1.0"
EQUITY_PATTERN = r"^(0(\.\d+)?|1(\.0+)?|\.\d+)$"


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, pattern=EQUITY_PATTERN)
    company_handle: str = Field(..., alias="companyHandle", min_length=1, max_length=25)

    class Config:
        populate_by_name = True
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    Omitted fields are left untouched; use model_dump(exclude_unset=True) so
    an explicit null (clear the field) is kept apart from an omitted one.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, pattern=EQUITY_PATTERN)

    class Config:
        extra = "forbid"

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        """Title is required on the table, so it can be changed but not cleared"""
        if v is None:
            raise ValueError("title cannot be null")
        return v


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company_handle: str = Field(..., alias="companyHandle")

    class Config:
        populate_by_name = True


class CompanySummary(BaseModel):
    """Public company fields inlined into a job's detail view"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True


class JobDetailResponse(BaseModel):
    """Schema for a single job with its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company: Optional[CompanySummary] = None
