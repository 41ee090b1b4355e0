import logging

from asyncpg import ForeignKeyViolationError, UniqueViolationError
from fastapi import APIRouter, HTTPException, status

from schemas.commons import AdminOrSameUser, AdminUser, DBConnection, JobId, Username
from schemas.user import (
    ApplicationResponse,
    TokenResponse,
    User,
    UserCreateRequest,
    UserCreateResponse,
    UserDeleteResponse,
    UserDetail,
    UserDetailResponse,
    UserListResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
    UserUpdateRequest,
)
from utils.auth import DUMMY_HASH, create_user_token, hash_password, verify_password
from utils.query import NoDataError, build_set_clause

logger = logging.getLogger(__name__)

USER_COLUMN_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
}
USER_COLUMNS = "username, first_name, last_name, email, is_admin"

router = APIRouter(
    tags=["USERS"],
)


def user_not_found(username: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"No user: {username}"
    )


async def insert_user(conn, user: UserRegisterRequest, is_admin: bool) -> dict:
    """유저 저장 (username 중복이면 409)"""
    try:
        row = await conn.fetchrow(
            f"""
            INSERT INTO users (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {USER_COLUMNS}
            """,
            user.username,
            hash_password(user.password),
            user.first_name,
            user.last_name,
            user.email,
            is_admin,
        )
    except UniqueViolationError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Duplicate username: {user.username}",
        )
    logger.info("User created: %s (admin=%s)", user.username, is_admin)
    return dict(row)


@router.post("/auth/token", response_model=TokenResponse)
async def get_auth_token(user: UserLoginRequest, conn: DBConnection) -> TokenResponse:
    """로그인"""
    db_user = await conn.fetchrow(
        "SELECT username, password, is_admin FROM users WHERE username = $1",
        user.username,
    )

    # 타이밍 공격 방지: 유저 존재 여부와 관계없이 항상 해시 비교 수행
    hashed_password = db_user["password"] if db_user else DUMMY_HASH
    is_password_correct = verify_password(user.password, hashed_password)

    if db_user is None or not is_password_correct:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username/password",
        )

    return TokenResponse(access_token=create_user_token(db_user["username"], db_user["is_admin"]))


@router.post("/auth/register", response_model=TokenResponse,
             status_code=status.HTTP_201_CREATED)
async def register(user: UserRegisterRequest, conn: DBConnection) -> TokenResponse:
    """회원가입 (일반 유저로만 가입)"""
    new_user = await insert_user(conn, user, is_admin=False)
    return TokenResponse(access_token=create_user_token(new_user["username"], False))


@router.post("/users", response_model=UserCreateResponse,
             status_code=status.HTTP_201_CREATED)
async def create_user(admin: AdminUser, user: UserCreateRequest, conn: DBConnection) -> UserCreateResponse:
    """관리자용 유저 생성 (관리자 계정 생성 가능)"""
    new_user = await insert_user(conn, user, is_admin=user.is_admin)
    return UserCreateResponse(
        user=User(**new_user),
        token=create_user_token(new_user["username"], new_user["is_admin"]),
    )


@router.get("/users", response_model=UserListResponse)
async def get_users(admin: AdminUser, conn: DBConnection) -> UserListResponse:
    """전체 유저 목록 (관리자)"""
    rows = await conn.fetch(f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
    return UserListResponse(users=[User(**dict(row)) for row in rows])


@router.get("/users/{username}", response_model=UserDetailResponse)
async def get_user(username: Username, user: AdminOrSameUser, conn: DBConnection) -> UserDetailResponse:
    """유저 조회 (관리자 또는 본인, 지원한 공고 ID 포함)"""
    row = await conn.fetchrow(
        f"SELECT {USER_COLUMNS} FROM users WHERE username = $1",
        username,
    )
    if row is None:
        raise user_not_found(username)

    job_rows = await conn.fetch(
        "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
        username,
    )

    return UserDetailResponse(
        user=UserDetail(**dict(row), jobs=[r["job_id"] for r in job_rows])
    )


@router.patch("/users/{username}", response_model=UserResponse)
async def update_user(
        username: Username, user: AdminOrSameUser, update_data: UserUpdateRequest, conn: DBConnection) -> UserResponse:
    """유저 정보 부분 수정 (관리자 또는 본인, 비밀번호는 해싱 후 저장)"""
    update_fields = update_data.model_dump(by_alias=True, exclude_unset=True)
    if "password" in update_fields:
        update_fields["password"] = hash_password(update_fields["password"])

    try:
        set_clause, values = build_set_clause(update_fields, USER_COLUMN_MAP)
    except NoDataError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    username_idx = len(values) + 1
    row = await conn.fetchrow(
        f"""
        UPDATE users
        SET {set_clause}
        WHERE username = ${username_idx}
        RETURNING {USER_COLUMNS}
        """,
        *values,
        username,
    )
    if row is None:
        raise user_not_found(username)

    logger.info("User updated: %s (%s) by %s", username, ", ".join(update_fields), user["username"])
    return UserResponse(user=User(**dict(row)))


@router.delete("/users/{username}", response_model=UserDeleteResponse)
async def delete_user(username: Username, user: AdminOrSameUser, conn: DBConnection) -> UserDeleteResponse:
    """회원 탈퇴 / 삭제"""
    deleted = await conn.fetchval(
        "DELETE FROM users WHERE username = $1 RETURNING username",
        username,
    )
    if deleted is None:
        raise user_not_found(username)

    logger.info("User deleted: %s by %s", username, user["username"])
    return UserDeleteResponse(deleted=deleted)


@router.post("/users/{username}/jobs/{job_id}", response_model=ApplicationResponse,
             status_code=status.HTTP_201_CREATED)
async def apply_to_job(
        username: Username, job_id: JobId, user: AdminOrSameUser, conn: DBConnection) -> ApplicationResponse:
    """채용공고 지원"""
    try:
        await conn.execute(
            "INSERT INTO applications (username, job_id) VALUES ($1, $2)",
            username,
            job_id,
        )
    except ForeignKeyViolationError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No user or job: {username}, {job_id}",
        )
    except UniqueViolationError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Already applied: {job_id}",
        )

    logger.info("Application: %s -> job %s", username, job_id)
    return ApplicationResponse(applied=job_id)
