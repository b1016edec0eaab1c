from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base, generate_id


class AuthAccount(Base):
    """
    인증 서브시스템이 관리하는 로그인 계정입니다.
    프로필(User)과 같은 id를 공유하지만, 프로필이 없는 계정도 존재할 수 있습니다.
    """
    __tablename__ = "auth_accounts"
    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    display_name = Column(String)
    created_at = Column(DateTime, server_default=func.now())


class User(Base):
    """
    관리자 패널에 접근하는 운영진의 프로필 레코드입니다.
    한 사용자는 승인 여부가 붙은 여러 역할(UserRole)을 가질 수 있습니다.
    """
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String, nullable=False)
    name = Column(String)
    created_at = Column(DateTime, server_default=func.now())

    role_assignments = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
