from sqlalchemy import Column, String, Text, Boolean, Date, DateTime, func
from ..database import Base, generate_id


class Survey(Base):
    """외부 설문 링크를 가진 설문입니다. active가 False면 종료된 설문으로 표시됩니다."""
    __tablename__ = "surveys"
    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text)
    survey_link = Column(String)
    start_date = Column(Date)
    end_date = Column(Date)
    active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(36))
    created_at = Column(DateTime, server_default=func.now())
