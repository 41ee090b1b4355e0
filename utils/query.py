from typing import Any, Mapping, NamedTuple


class NoDataError(ValueError):
    """업데이트할 필드가 하나도 없을 때"""


class SetClause(NamedTuple):
    set_clause: str
    values: list[Any]


def build_set_clause(
    update_fields: Mapping[str, Any],
    column_map: Mapping[str, str]
) -> SetClause:
    """
    부분 수정(PATCH)용 UPDATE SET 절 생성.

    Args:
        update_fields: 업데이트할 필드와 값 {"firstName": "Aliya", "age": 32}
            - 키 순서대로 $1, $2, ... 번호가 매겨짐
            - None 값도 그대로 업데이트 (컬럼을 NULL로)
        column_map: API 필드명 -> DB 컬럼명 매핑 {"firstName": "first_name"}
            - 매핑에 없는 필드는 필드명을 그대로 컬럼명으로 사용

    Returns:
        SetClause(set_clause, values)
        - set_clause: '"first_name"=$1, "age"=$2'
        - values: ["Aliya", 32]

    Raises:
        NoDataError: update_fields가 비어 있을 때 ("No data")

    Example:
        >>> clause, values = build_set_clause({"firstName": "Aliya", "age": 32},
        ...                                   {"firstName": "first_name"})
        >>> clause
        '"first_name"=$1, "age"=$2'
        >>> values
        ['Aliya', 32]
    """
    keys = list(update_fields)
    if not keys:
        raise NoDataError("No data")

    set_parts = [
        f'"{column_map.get(field_name, field_name)}"=${idx}'
        for idx, field_name in enumerate(keys, start=1)
    ]
    values = [update_fields[field_name] for field_name in keys]

    return SetClause(", ".join(set_parts), values)
