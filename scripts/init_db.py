"""테이블 생성 + 테스트 데이터 생성 스크립트

사용법:
    python scripts/init_db.py           # 테이블 생성 + 테스트 계정/회사/채용공고
    python scripts/init_db.py --reset   # 테이블 삭제 후 다시 생성

테스트 계정:
    - admin / password1 (관리자)
    - testuser / password1

이미 있는 유저/회사는 건너뛰고, 채용공고는 jobs 테이블이 비어 있을 때만 생성
"""
import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert

from db.base import Base
from db.models import Company, Job, User
from db.session import engine
from utils.auth import hash_password

# 테스트 계정 (평문 비밀번호)
TEST_USERS = [
    {
        "username": "admin",
        "password": "password1",
        "first_name": "Admin",
        "last_name": "User",
        "email": "admin@example.com",
        "is_admin": True,
    },
    {
        "username": "testuser",
        "password": "password1",
        "first_name": "Test",
        "last_name": "User",
        "email": "test@example.com",
        "is_admin": False,
    },
]

TEST_COMPANIES = [
    {
        "handle": "c1",
        "name": "C1",
        "num_employees": 1,
        "description": "Desc1",
        "logo_url": "http://c1.img",
    },
    {
        "handle": "c2",
        "name": "C2",
        "num_employees": 2,
        "description": "Desc2",
        "logo_url": "http://c2.img",
    },
]

TEST_JOBS = [
    {"title": "Job1", "salary": 100, "equity": Decimal("0.1"), "company_handle": "c1"},
    {"title": "Job2", "salary": 200, "equity": Decimal("0"), "company_handle": "c1"},
    {"title": "Job3", "salary": 300, "equity": None, "company_handle": "c2"},
]


def seed_users() -> list[dict]:
    """유저 데이터 생성 (비밀번호 해싱)"""
    return [{**user, "password": hash_password(user["password"])} for user in TEST_USERS]


async def init_db(reset: bool = False) -> None:
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
        await seed_data(conn)

    await engine.dispose()


async def seed_data(conn) -> None:
    """테스트 데이터 생성 (여러 번 실행해도 중복 없음)"""
    await conn.execute(insert(User).values(seed_users()).on_conflict_do_nothing())
    await conn.execute(insert(Company).values(TEST_COMPANIES).on_conflict_do_nothing())

    # jobs는 자연키가 없어서 비어 있을 때만 넣음
    job_count = await conn.scalar(select(func.count()).select_from(Job))
    if job_count == 0:
        await conn.execute(insert(Job).values(TEST_JOBS))


def main() -> None:
    parser = argparse.ArgumentParser(description="Create tables and seed test data")
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    args = parser.parse_args()

    asyncio.run(init_db(reset=args.reset))

    print("✅ DB 초기화 완료!")
    print("\n👤 테스트 계정:")
    for user in TEST_USERS:
        print(f"   - username: {user['username']}")
        print(f"     password: {user['password']}")
        print()


if __name__ == "__main__":
    main()
