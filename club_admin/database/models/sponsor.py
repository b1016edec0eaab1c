from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, func
from ..database import Base, generate_id


class Sponsor(Base):
    __tablename__ = "sponsors"
    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    description = Column(Text)
    logo = Column(String)
    website = Column(String)
    sponsor_type = Column(String)
    active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, default=0)
    created_at = Column(DateTime, server_default=func.now())
