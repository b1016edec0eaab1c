from sqlalchemy import Column, String, Text, Boolean, Date, DateTime, func
from ..database import Base, generate_id


class Internship(Base):
    """기업 인턴십 공고입니다."""
    __tablename__ = "internships"
    id = Column(String(36), primary_key=True, default=generate_id)
    company_name = Column(String, nullable=False)
    position = Column(String, nullable=False)
    location = Column(String)
    description = Column(Text)
    application_link = Column(String)
    application_deadline = Column(Date)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
