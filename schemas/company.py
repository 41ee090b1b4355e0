from decimal import Decimal
from typing import Annotated

from pydantic import ConfigDict, Field, StringConstraints, model_validator

from schemas.commons import CamelModel, Count, Handle, JobId, Name

Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)]
LogoUrl = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500, pattern=r"^https?://")]


class CompanyCreateRequest(CamelModel):
    model_config = ConfigDict(extra='forbid')

    handle: Handle
    name: Name
    description: Description
    num_employees: Count | None = None
    logo_url: LogoUrl | None = None


class CompanyUpdateRequest(CamelModel):
    model_config = ConfigDict(extra='forbid')

    name: Name | None = None
    description: Description | None = None
    num_employees: Count | None = None
    logo_url: LogoUrl | None = None

    @model_validator(mode='after')
    def check_not_null_fields(self):
        """
        "미전송"은 수정하지 않음, "명시적 null"은 NULL로 수정.
        NOT NULL 컬럼(name, description)은 null로 보낼 수 없음
        """
        for field in ("name", "description"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field}은 null로 설정할 수 없습니다.")
        return self


class JobSummary(CamelModel):
    """회사 상세에 포함되는 공고 요약"""
    id: JobId
    title: str
    salary: int | None = None
    equity: Decimal | None = None


class Company(CamelModel):
    handle: Handle
    name: str
    description: str
    num_employees: int | None = None
    logo_url: str | None = None


class CompanyDetail(Company):
    jobs: list[JobSummary] = Field(default_factory=list)


class CompanyResponse(CamelModel):
    company: Company


class CompanyDetailResponse(CamelModel):
    company: CompanyDetail


class CompanyListResponse(CamelModel):
    companies: list[Company]


class CompanyDeleteResponse(CamelModel):
    deleted: str
