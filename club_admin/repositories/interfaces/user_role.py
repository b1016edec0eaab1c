from abc import ABC, abstractmethod
from typing import List, Optional
from club_admin.database import models

class IUserRoleRepository(ABC):
    @abstractmethod
    def list_for_user(self, user_id: str, approved_only: bool = True) -> List[models.UserRole]:
        """
        특정 사용자의 역할 할당 목록을 조회합니다.

        Args:
            user_id: 사용자 ID.
            approved_only: True면 승인된(is_approved) 할당만 반환합니다.
        """
        pass

    @abstractmethod
    def list_all(self) -> List[models.UserRole]:
        """모든 역할 할당을 조회합니다."""
        pass

    @abstractmethod
    def find(self, user_id: str, role: str) -> Optional[models.UserRole]:
        """사용자와 역할 이름으로 할당 하나를 조회합니다."""
        pass

    @abstractmethod
    def create(self, assignment: models.UserRole) -> models.UserRole:
        """새 역할 할당을 생성합니다."""
        pass

    @abstractmethod
    def set_approved(self, assignment: models.UserRole, approved: bool) -> models.UserRole:
        """할당의 승인 상태를 변경합니다."""
        pass

    @abstractmethod
    def delete(self, assignment: models.UserRole) -> bool:
        """역할 할당을 삭제합니다."""
        pass

    @abstractmethod
    def count_pending(self) -> int:
        """승인 대기 중인 할당 수를 반환합니다."""
        pass
