from sqlalchemy import Column, String, Integer, Boolean, DateTime, func
from ..database import Base, generate_id


class TeamMember(Base):
    """
    웹사이트의 팀 명단에 표시되는 구성원입니다.
    role은 명단에 표시되는 직함이며, 권한 역할(UserRole)과는 무관합니다.
    """
    __tablename__ = "team_members"
    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    role = Column(String)
    team = Column(String)
    image = Column(String)
    linkedin = Column(String)
    active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, default=0)
    created_at = Column(DateTime, server_default=func.now())
