from typing import List, Optional
from sqlalchemy.orm import Session
from club_admin.database import models
from club_admin.repositories.interfaces import IUserRoleRepository

class SqlalchemyUserRoleRepository(IUserRoleRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def list_for_user(self, user_id: str, approved_only: bool = True) -> List[models.UserRole]:
        query = self.db.query(models.UserRole).filter(models.UserRole.user_id == user_id)
        if approved_only:
            query = query.filter(models.UserRole.is_approved.is_(True))
        return query.all()

    def list_all(self) -> List[models.UserRole]:
        return self.db.query(models.UserRole).order_by(models.UserRole.created_at.desc()).all()

    def find(self, user_id: str, role: str) -> Optional[models.UserRole]:
        return self.db.query(models.UserRole).filter(
            models.UserRole.user_id == user_id,
            models.UserRole.role == role
        ).first()

    def create(self, assignment: models.UserRole) -> models.UserRole:
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        return assignment

    def set_approved(self, assignment: models.UserRole, approved: bool) -> models.UserRole:
        assignment.is_approved = approved
        self.db.commit()
        self.db.refresh(assignment)
        return assignment

    def delete(self, assignment: models.UserRole) -> bool:
        if assignment:
            self.db.delete(assignment)
            self.db.commit()
            return True
        return False

    def count_pending(self) -> int:
        return self.db.query(models.UserRole).filter(models.UserRole.is_approved.is_(False)).count()
