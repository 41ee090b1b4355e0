from typing import Annotated

import asyncpg
from fastapi import Depends
from pydantic import Field, BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

from utils.auth import get_current_user, require_admin, require_admin_or_same_user
from utils.database import get_connection

Handle = Annotated[
    str,
    Field(
        pattern=r"^[a-z0-9-]{1,25}$",
        description="회사 핸들",
        examples=["acme-corp"],
    ),
]

# 경로 조회용: 형식이 틀린 핸들도 422가 아니라 "No company" 404로 응답
HandleLookup = Annotated[str, Field(max_length=200, description="회사 핸들")]

Username = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=25),
]

JobId = Annotated[int, Field(ge=1, description="채용공고 ID")]

Name = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=200),
]

Count = Annotated[int, Field(ge=0)]

DBConnection = Annotated[asyncpg.Connection, Depends(get_connection)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
AdminUser = Annotated[dict, Depends(require_admin)]
AdminOrSameUser = Annotated[dict, Depends(require_admin_or_same_user)]


class CamelModel(BaseModel):
    """JSON은 camelCase, 파이썬/DB 쪽은 snake_case"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
