from decimal import Decimal
from typing import Annotated

from pydantic import ConfigDict, Field, StringConstraints, model_validator

from schemas.commons import CamelModel, Count, Handle, JobId
from schemas.company import Company, JobSummary

Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=200),
]

Equity = Annotated[Decimal, Field(ge=0, le=1, description="지분율 (0 ~ 1)")]


class JobCreateRequest(CamelModel):
    model_config = ConfigDict(extra='forbid')

    title: Title
    salary: Count | None = None
    equity: Equity | None = None
    company_handle: Handle


class JobUpdateRequest(CamelModel):
    """id, companyHandle은 수정 불가"""
    model_config = ConfigDict(extra='forbid')

    title: Title | None = None
    salary: Count | None = None
    equity: Equity | None = None

    @model_validator(mode='after')
    def check_title_not_null(self):
        if "title" in self.model_fields_set and self.title is None:
            raise ValueError("title은 null로 설정할 수 없습니다.")
        return self


class Job(JobSummary):
    company_handle: Handle


class JobDetail(JobSummary):
    company: Company | None = None


class JobResponse(CamelModel):
    job: Job


class JobDetailResponse(CamelModel):
    job: JobDetail


class JobListResponse(CamelModel):
    jobs: list[Job]


class JobDeleteResponse(CamelModel):
    deleted: JobId
