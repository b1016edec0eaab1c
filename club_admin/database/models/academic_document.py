from sqlalchemy import Column, String, Text, Integer, DateTime, func
from ..database import Base, generate_id


class AcademicDocument(Base):
    __tablename__ = "academic_documents"
    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text)
    category = Column(String)
    file_url = Column(String)
    downloads = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
