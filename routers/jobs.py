import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from schemas.commons import AdminUser, Count, DBConnection, JobId
from schemas.company import Company
from schemas.job import (
    Job,
    JobCreateRequest,
    JobDeleteResponse,
    JobDetail,
    JobDetailResponse,
    JobListResponse,
    JobResponse,
    JobUpdateRequest,
)
from utils.filters import allowed_query_params, build_where_clause
from utils.query import NoDataError, build_set_clause

logger = logging.getLogger(__name__)

# API 필드명과 DB 컬럼명이 모두 같음
JOB_COLUMN_MAP: dict[str, str] = {}
JOB_COLUMNS = "id, title, salary, equity, company_handle"

router = APIRouter(
    tags=["JOBS"],
)


def job_not_found(job_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"No job: {job_id}"
    )


@router.post("/jobs", response_model=JobResponse,
             status_code=status.HTTP_201_CREATED)
async def create_job(admin: AdminUser, job: JobCreateRequest, conn: DBConnection) -> JobResponse:
    """채용공고 등록 (관리자)"""
    company_exists = await conn.fetchval(
        "SELECT handle FROM companies WHERE handle = $1",
        job.company_handle,
    )
    if company_exists is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Company {job.company_handle} not found.",
        )

    row = await conn.fetchrow(
        f"""
        INSERT INTO jobs (title, salary, equity, company_handle)
        VALUES ($1, $2, $3, $4)
        RETURNING {JOB_COLUMNS}
        """,
        job.title,
        job.salary,
        job.equity,
        job.company_handle,
    )

    logger.info("Job created: %s (%s) by %s", row["id"], job.company_handle, admin["username"])
    return JobResponse(job=Job(**dict(row)))


@router.get(
    "/jobs",
    response_model=JobListResponse,
    dependencies=[Depends(allowed_query_params("title", "minSalary", "hasEquity"))],
)
async def get_jobs(
        conn: DBConnection,
        title: Annotated[str | None, Query(min_length=1, max_length=200)] = None,
        min_salary: Annotated[Count | None, Query(alias="minSalary")] = None,
        has_equity: Annotated[bool, Query(alias="hasEquity")] = False,
) -> JobListResponse:
    """
    채용공고 목록 조회
    - title: 대소문자 무시, 부분 일치
    - minSalary: 최소 연봉 이상
    - hasEquity: true면 지분이 0보다 큰 공고만 (false면 필터 없음)
    """
    conditions = []
    if title:
        conditions.append(("title ILIKE {}", f"%{title}%"))
    if min_salary is not None:
        conditions.append(("salary >= {}", min_salary))
    if has_equity:
        conditions.append(("equity > 0", None))
    where_clause, values = build_where_clause(conditions)

    rows = await conn.fetch(
        f"SELECT {JOB_COLUMNS} FROM jobs {where_clause} ORDER BY title, id",
        *values,
    )

    return JobListResponse(jobs=[Job(**dict(row)) for row in rows])


@router.get("/jobs/{job_id}", response_model=JobDetailResponse)
async def get_job(job_id: JobId, conn: DBConnection) -> JobDetailResponse:
    """채용공고 상세 조회 (회사 정보 포함)"""
    row = await conn.fetchrow(
        f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1",
        job_id,
    )
    if row is None:
        raise job_not_found(job_id)

    job = dict(row)
    company_row = await conn.fetchrow(
        """
        SELECT handle, name, description, num_employees, logo_url
        FROM companies
        WHERE handle = $1
        """,
        job.pop("company_handle"),
    )

    return JobDetailResponse(
        job=JobDetail(
            **job,
            company=Company(**dict(company_row)) if company_row else None,
        )
    )


@router.patch("/jobs/{job_id}", response_model=JobResponse)
async def update_job(
        admin: AdminUser, job_id: JobId, update_data: JobUpdateRequest, conn: DBConnection) -> JobResponse:
    """채용공고 부분 수정 (관리자)"""
    update_fields = update_data.model_dump(by_alias=True, exclude_unset=True)
    try:
        set_clause, values = build_set_clause(update_fields, JOB_COLUMN_MAP)
    except NoDataError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    id_idx = len(values) + 1
    row = await conn.fetchrow(
        f"""
        UPDATE jobs
        SET {set_clause}
        WHERE id = ${id_idx}
        RETURNING {JOB_COLUMNS}
        """,
        *values,
        job_id,
    )
    if row is None:
        raise job_not_found(job_id)

    logger.info("Job updated: %s (%s) by %s", job_id, ", ".join(update_fields), admin["username"])
    return JobResponse(job=Job(**dict(row)))


@router.delete("/jobs/{job_id}", response_model=JobDeleteResponse)
async def delete_job(admin: AdminUser, job_id: JobId, conn: DBConnection) -> JobDeleteResponse:
    """채용공고 삭제 (관리자)"""
    deleted = await conn.fetchval(
        "DELETE FROM jobs WHERE id = $1 RETURNING id",
        job_id,
    )
    if deleted is None:
        raise job_not_found(job_id)

    logger.info("Job deleted: %s by %s", job_id, admin["username"])
    return JobDeleteResponse(deleted=deleted)
