from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ..database import Base, generate_id


class UserRole(Base):
    """
    사용자(User)와 역할 사이의 할당 레코드입니다.
    관리자가 승인(is_approved)한 할당만 유효 권한 계산에 포함됩니다.
    role 컬럼은 자유 형식 문자열이며, 읽을 때 Role 열거형으로 검증됩니다.
    """
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String, nullable=False)
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="role_assignments")
