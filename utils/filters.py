from typing import Callable

from fastapi import HTTPException, Request, status


def allowed_query_params(*names: str) -> Callable[[Request], None]:
    """
    허용되지 않은 쿼리 파라미터가 있으면 400 (조용히 무시하지 않음)

    Example:
        @router.get("/companies", dependencies=[Depends(allowed_query_params("name"))])
    """
    allowed = frozenset(names)

    def check(request: Request) -> None:
        invalid = sorted(set(request.query_params.keys()) - allowed)
        if invalid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid query parameters: {', '.join(invalid)}",
            )

    return check


def build_where_clause(conditions: list[tuple[str, object]]) -> tuple[str, list]:
    """
    (조건 템플릿, 값) 목록 -> "WHERE ... AND ..." 와 바인딩 값 리스트.
    템플릿의 "{}" 자리에 $n 이 들어가고, 값이 None이면 바인딩 없는 조건으로 취급.

    Example:
        >>> build_where_clause([("name ILIKE {}", "%acme%"), ("equity > 0", None)])
        ('WHERE name ILIKE $1 AND equity > 0', ['%acme%'])
    """
    parts = []
    values = []
    for template, value in conditions:
        if value is None:
            parts.append(template)
        else:
            values.append(value)
            parts.append(template.format(f"${len(values)}"))

    if not parts:
        return "", values
    return "WHERE " + " AND ".join(parts), values
