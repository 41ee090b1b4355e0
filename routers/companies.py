import logging
from typing import Annotated

from asyncpg import UniqueViolationError
from fastapi import APIRouter, Depends, HTTPException, Query, status

from schemas.commons import AdminUser, Count, DBConnection, HandleLookup
from schemas.company import (
    Company,
    CompanyCreateRequest,
    CompanyDeleteResponse,
    CompanyDetail,
    CompanyDetailResponse,
    CompanyListResponse,
    CompanyResponse,
    CompanyUpdateRequest,
    JobSummary,
)
from utils.filters import allowed_query_params, build_where_clause
from utils.query import NoDataError, build_set_clause

logger = logging.getLogger(__name__)

# API 필드명 -> DB 컬럼명
COMPANY_COLUMN_MAP = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}
COMPANY_COLUMNS = "handle, name, description, num_employees, logo_url"
COMPANY_NAME_CONSTRAINT = "uq_companies_name"

router = APIRouter(
    tags=["COMPANIES"],
)


def company_not_found(handle: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"No company: {handle}"
    )


def duplicate_company(e: UniqueViolationError, handle: str, name: str | None) -> HTTPException:
    """UNIQUE 위반 -> 409 (name 제약이면 이름 중복, 아니면 핸들 중복)"""
    if e.constraint_name == COMPANY_NAME_CONSTRAINT:
        detail = f"Duplicate company name: {name}"
    else:
        detail = f"Duplicate company: {handle}"
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )


@router.post("/companies", response_model=CompanyResponse,
             status_code=status.HTTP_201_CREATED)
async def create_company(admin: AdminUser, company: CompanyCreateRequest, conn: DBConnection) -> CompanyResponse:
    """회사 등록 (관리자)"""
    try:
        row = await conn.fetchrow(
            f"""
            INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {COMPANY_COLUMNS}
            """,
            company.handle,
            company.name,
            company.description,
            company.num_employees,
            company.logo_url,
        )
    except UniqueViolationError as e:
        raise duplicate_company(e, company.handle, company.name) from e

    logger.info("Company created: %s by %s", company.handle, admin["username"])
    return CompanyResponse(company=Company(**dict(row)))


@router.get(
    "/companies",
    response_model=CompanyListResponse,
    dependencies=[Depends(allowed_query_params("name", "minEmployees", "maxEmployees"))],
)
async def get_companies(
        conn: DBConnection,
        name: Annotated[str | None, Query(min_length=1, max_length=200)] = None,
        min_employees: Annotated[Count | None, Query(alias="minEmployees")] = None,
        max_employees: Annotated[Count | None, Query(alias="maxEmployees")] = None,
) -> CompanyListResponse:
    """
    회사 목록 조회
    - name: 대소문자 무시, 부분 일치
    - minEmployees / maxEmployees: 직원 수 범위
    - 조건에 맞는 회사가 없으면 빈 리스트
    """
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="minEmployees cannot be greater than maxEmployees",
        )

    conditions = []
    if name:
        conditions.append(("name ILIKE {}", f"%{name}%"))
    if min_employees is not None:
        conditions.append(("num_employees >= {}", min_employees))
    if max_employees is not None:
        conditions.append(("num_employees <= {}", max_employees))
    where_clause, values = build_where_clause(conditions)

    rows = await conn.fetch(
        f"SELECT {COMPANY_COLUMNS} FROM companies {where_clause} ORDER BY name",
        *values,
    )

    return CompanyListResponse(companies=[Company(**dict(row)) for row in rows])


@router.get("/companies/{handle}", response_model=CompanyDetailResponse)
async def get_company(handle: HandleLookup, conn: DBConnection) -> CompanyDetailResponse:
    """회사 상세 조회 (채용공고 포함)"""
    row = await conn.fetchrow(
        f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1",
        handle,
    )
    if row is None:
        raise company_not_found(handle)

    job_rows = await conn.fetch(
        """
        SELECT id, title, salary, equity
        FROM jobs
        WHERE company_handle = $1
        ORDER BY id
        """,
        handle,
    )

    return CompanyDetailResponse(
        company=CompanyDetail(
            **dict(row),
            jobs=[JobSummary(**dict(job)) for job in job_rows],
        )
    )


@router.patch("/companies/{handle}", response_model=CompanyResponse)
async def update_company(
        admin: AdminUser, handle: HandleLookup, update_data: CompanyUpdateRequest, conn: DBConnection) -> CompanyResponse:
    """
    회사 정보 부분 수정 (관리자)
    - 보낸 필드만 수정, null은 NULL로 수정
    - handle은 수정 불가
    """
    update_fields = update_data.model_dump(by_alias=True, exclude_unset=True)
    try:
        set_clause, values = build_set_clause(update_fields, COMPANY_COLUMN_MAP)
    except NoDataError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    handle_idx = len(values) + 1
    try:
        row = await conn.fetchrow(
            f"""
            UPDATE companies
            SET {set_clause}
            WHERE handle = ${handle_idx}
            RETURNING {COMPANY_COLUMNS}
            """,
            *values,
            handle,
        )
    except UniqueViolationError as e:
        raise duplicate_company(e, handle, update_fields.get("name")) from e
    if row is None:
        raise company_not_found(handle)

    logger.info("Company updated: %s (%s) by %s", handle, ", ".join(update_fields), admin["username"])
    return CompanyResponse(company=Company(**dict(row)))


@router.delete("/companies/{handle}", response_model=CompanyDeleteResponse)
async def delete_company(admin: AdminUser, handle: HandleLookup, conn: DBConnection) -> CompanyDeleteResponse:
    """회사 삭제 (관리자, 채용공고도 함께 삭제)"""
    deleted = await conn.fetchval(
        "DELETE FROM companies WHERE handle = $1 RETURNING handle",
        handle,
    )
    if deleted is None:
        raise company_not_found(handle)

    logger.info("Company deleted: %s by %s", handle, admin["username"])
    return CompanyDeleteResponse(deleted=deleted)
