import logging
import os

from club_admin.auth import Role
from club_admin.config import configure_logging, load_config_from_env
from club_admin.services.identity_service import hash_password
from .database import Base, create_db_engine, create_session_factory
from .models import AuthAccount, User, UserRole

LOGGER = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.org"


def initialize_db(database_url: str, admin_email: str = DEFAULT_ADMIN_EMAIL, admin_password: str = "admin") -> bool:
    """
    DB와 테이블을 생성하고, 승인된 'baskan' 역할을 가진 관리자 계정을 삽입합니다.

    Returns:
        기본 데이터를 새로 삽입했으면 True, 이미 있어서 건너뛰었으면 False.
    """
    LOGGER.info("DB 초기화 중: %s", database_url)
    engine = create_db_engine(database_url)

    # 모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    Base.metadata.create_all(bind=engine)
    LOGGER.info("테이블 생성 완료.")

    db = create_session_factory(engine)()
    try:
        if db.query(AuthAccount).first():
            LOGGER.info("기본 데이터가 이미 존재합니다. 초기화를 건너뜁니다.")
            return False

        account = AuthAccount(email=admin_email, password_hash=hash_password(admin_password), display_name="Admin")
        db.add(account)
        db.commit()

        # 계정과 같은 id로 프로필과 승인된 역할을 만듭니다.
        db.add(User(id=account.id, email=admin_email, name="Admin"))
        db.add(UserRole(user_id=account.id, role=Role.BASKAN.value, is_approved=True))
        db.commit()
        LOGGER.info("DB 초기화 및 기본 데이터 삽입 완료.")
        return True
    except Exception:
        db.rollback()
        LOGGER.exception("기본 데이터 삽입 중 오류 발생")
        raise
    finally:
        db.close()


if __name__ == '__main__':
    config = load_config_from_env(".env")
    configure_logging(config)
    initialize_db(
        config.database_url,
        os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL),
        os.getenv("ADMIN_PASSWORD", "admin"),
    )
