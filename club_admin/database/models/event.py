from sqlalchemy import Column, String, Text, DateTime, func
from ..database import Base, generate_id


class Event(Base):
    """
    동아리 행사입니다.
    status는 'upcoming'(예정) 또는 'completed'(종료) 값을 가집니다.
    """
    __tablename__ = "events"
    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text)
    event_date = Column(DateTime)
    location = Column(String)
    event_type = Column(String)
    status = Column(String, nullable=False, default="upcoming")
    created_by = Column(String(36))
    created_at = Column(DateTime, server_default=func.now())
