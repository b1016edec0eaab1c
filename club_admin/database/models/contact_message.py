from sqlalchemy import Column, String, Text, DateTime, func
from ..database import Base, generate_id


class ContactMessage(Base):
    """
    웹사이트 문의 양식으로 들어온 메시지입니다.
    status는 'unread' 또는 'read' 값을 가집니다.
    """
    __tablename__ = "contact_messages"
    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    subject = Column(String)
    message = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="unread")
    created_at = Column(DateTime, server_default=func.now())
