from sqlalchemy import Column, String, Text, Boolean, DateTime, func
from ..database import Base, generate_id


class News(Base):
    """동아리 웹사이트에 게시되는 뉴스 및 공지입니다."""
    __tablename__ = "news"
    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    summary = Column(Text)
    content = Column(Text)
    category = Column(String)
    image_url = Column(String)
    published = Column(Boolean, nullable=False, default=False)
    author_id = Column(String(36))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
