import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# 모든 모델 클래스가 상속받을 Base 클래스
Base = declarative_base()


def create_db_engine(database_url: str):
    """
    설정된 데이터베이스 URL로 SQLAlchemy 엔진을 생성합니다.

    SQLite는 WSGI 서버의 여러 스레드에서 접근하므로 check_same_thread를 끕니다.
    인메모리 SQLite는 모든 세션이 같은 연결을 보도록 StaticPool을 사용합니다.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url)
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url, connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
    return create_engine(database_url, connect_args={"check_same_thread": False})


def create_session_factory(engine) -> sessionmaker:
    # autocommit=False, autoflush=False: 명시적으로 commit을 호출해야 DB에 반영됩니다.
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def generate_id() -> str:
    """원격 데이터 서비스와 같은 형식(UUID 문자열)의 기본 키를 생성합니다."""
    return str(uuid.uuid4())
