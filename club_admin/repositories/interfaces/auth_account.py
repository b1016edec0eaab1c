from abc import ABC, abstractmethod
from typing import Optional
from club_admin.database import models

class IAuthAccountRepository(ABC):
    @abstractmethod
    def create(self, account_model: models.AuthAccount) -> models.AuthAccount:
        """새로운 인증 계정을 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, account_id: str) -> Optional[models.AuthAccount]:
        """고유 ID로 인증 계정을 조회합니다."""
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[models.AuthAccount]:
        """이메일로 인증 계정을 조회합니다."""
        pass
