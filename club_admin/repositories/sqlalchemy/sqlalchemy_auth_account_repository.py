from typing import Optional
from sqlalchemy.orm import Session
from club_admin.database import models
from club_admin.repositories.interfaces import IAuthAccountRepository

class SqlalchemyAuthAccountRepository(IAuthAccountRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, account_model: models.AuthAccount) -> models.AuthAccount:
        self.db.add(account_model)
        self.db.commit()
        self.db.refresh(account_model)
        return account_model

    def find_by_id(self, account_id: str) -> Optional[models.AuthAccount]:
        return self.db.query(models.AuthAccount).filter(models.AuthAccount.id == account_id).first()

    def find_by_email(self, email: str) -> Optional[models.AuthAccount]:
        return self.db.query(models.AuthAccount).filter(models.AuthAccount.email == email).first()
