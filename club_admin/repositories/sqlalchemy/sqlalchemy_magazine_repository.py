from typing import Optional
from sqlalchemy.orm import Session
from club_admin.database import models
from club_admin.repositories.interfaces import IMagazineRepository, IMagazineReadRepository
from .sqlalchemy_content_repository import SqlalchemyContentRepository

class SqlalchemyMagazineRepository(SqlalchemyContentRepository, IMagazineRepository):
    def __init__(self, db_session: Session):
        super().__init__(db_session, models.MagazineIssue, (models.MagazineIssue.issue_number.desc(),))

    def find_by_issue_number(self, issue_number: int) -> Optional[models.MagazineIssue]:
        return self.db.query(models.MagazineIssue).filter(
            models.MagazineIssue.issue_number == issue_number
        ).first()

class SqlalchemyMagazineReadRepository(SqlalchemyContentRepository, IMagazineReadRepository):
    def __init__(self, db_session: Session):
        super().__init__(db_session, models.MagazineRead)
