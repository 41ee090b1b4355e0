from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, model_validator

from schemas.commons import CamelModel, JobId, Name, Username

Password = Annotated[
    str,
    StringConstraints(
        min_length=5,
        max_length=64,
    ),
]


class UserLoginRequest(BaseModel):
    model_config = ConfigDict(extra='forbid')

    username: Username
    password: str


class UserRegisterRequest(CamelModel):
    """회원가입 (관리자 여부는 지정 불가)"""
    model_config = ConfigDict(extra='forbid')

    username: Username
    password: Password
    first_name: Name
    last_name: Name
    email: EmailStr


class UserCreateRequest(UserRegisterRequest):
    """관리자용 유저 생성"""
    is_admin: bool = False


class UserUpdateRequest(CamelModel):
    model_config = ConfigDict(extra='forbid')

    first_name: Name | None = None
    last_name: Name | None = None
    password: Password | None = None
    email: EmailStr | None = None

    @model_validator(mode='after')
    def check_not_null_fields(self):
        """PATCH에서 명시적으로 null을 보낸 필드 거부 (모든 컬럼이 NOT NULL)"""
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field}은 null로 설정할 수 없습니다.")
        return self


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class User(CamelModel):
    username: Username
    first_name: str
    last_name: str
    email: EmailStr
    is_admin: bool = False


class UserDetail(User):
    jobs: list[JobId] = Field(default_factory=list, description="지원한 채용공고 ID 목록")


class UserResponse(CamelModel):
    user: User


class UserDetailResponse(CamelModel):
    user: UserDetail


class UserCreateResponse(CamelModel):
    user: User
    token: str


class UserListResponse(CamelModel):
    users: list[User]


class UserDeleteResponse(CamelModel):
    deleted: Username


class ApplicationResponse(CamelModel):
    applied: JobId
