from sqlalchemy import Column, String, Text, Integer, Boolean, Date, DateTime, ForeignKey, func
from ..database import Base, generate_id


class MagazineIssue(Base):
    """
    디지털 잡지 아카이브의 한 호(issue)입니다.
    PDF와 표지 이미지는 외부 오브젝트 스토리지에 올라가 있고, 여기에는 URL만 저장합니다.
    """
    __tablename__ = "magazine_issues"
    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text)
    issue_number = Column(Integer, unique=True, nullable=False, index=True)
    publication_date = Column(Date)
    cover_image = Column(String)
    pdf_file = Column(String)
    slug = Column(String)
    published = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36))
    created_at = Column(DateTime, server_default=func.now())


class MagazineRead(Base):
    """잡지 열람 기록입니다. reading_duration은 초 단위입니다."""
    __tablename__ = "magazine_reads"
    id = Column(String(36), primary_key=True, default=generate_id)
    magazine_issue_id = Column(String(36), ForeignKey("magazine_issues.id", ondelete="CASCADE"), index=True)
    reading_duration = Column(Integer)
    device_type = Column(String)
    created_at = Column(DateTime, server_default=func.now())
