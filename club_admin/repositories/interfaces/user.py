from abc import ABC, abstractmethod
from typing import List, Optional
from club_admin.database import models

class IUserRepository(ABC):
    @abstractmethod
    def create(self, user_model: models.User) -> models.User:
        """새로운 사용자 프로필을 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[models.User]:
        """고유 ID로 특정 사용자 프로필을 조회합니다. 프로필이 없으면 None을 반환합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.User]:
        """모든 사용자 프로필 목록을 조회합니다."""
        pass
