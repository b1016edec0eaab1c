import logging
from typing import Any, Dict, List, Optional

from club_admin.auth import ROLE_LABELS, Role, parse_role
from club_admin.database import models
from club_admin.repositories.interfaces import IUserRepository, IUserRoleRepository
from club_admin.services.exceptions import (
    RoleAssignmentNotFoundError, RoleNotFoundError, UserCreationError, UserNotFoundError
)

LOGGER = logging.getLogger(__name__)


class RoleService:
    """운영진 프로필과 역할 할당(요청, 승인, 회수)을 관리하는 서비스입니다."""

    def __init__(self, user_repo: IUserRepository, user_role_repo: IUserRoleRepository):
        self.user_repo = user_repo
        self.user_role_repo = user_role_repo

    def create_profile(self, user_id: str, email: str, name: Optional[str] = None) -> Dict[str, Any]:
        """
        인증 계정에 대응하는 프로필(users) 레코드를 생성합니다.

        Raises:
            UserCreationError: 같은 ID의 프로필이 이미 있을 때.
            ValueError: ID나 이메일이 비어 있을 때.
        """
        if not user_id or not email:
            raise ValueError("Profile id and email are required.")
        if self.user_repo.find_by_id(user_id):
            raise UserCreationError(f"Profile for user '{user_id}' already exists.")
        created = self.user_repo.create(models.User(id=user_id, email=email, name=name))
        return {"id": created.id, "email": created.email, "name": created.name}

    def list_users(self) -> List[Dict[str, Any]]:
        users = self.user_repo.list_all()
        return [{"id": u.id, "email": u.email, "name": u.name} for u in users]

    def list_assignments(self) -> List[Dict[str, Any]]:
        """모든 역할 할당을 화면 표시용 라벨과 함께 조회합니다."""
        result = []
        for assignment in self.user_role_repo.list_all():
            role = parse_role(assignment.role)
            result.append({
                "user_id": assignment.user_id,
                "role": assignment.role,
                "label": ROLE_LABELS[role] if role else assignment.role,
                "is_approved": bool(assignment.is_approved),
            })
        return result

    def request_role(self, user_id: str, role_name: str) -> Dict[str, Any]:
        """
        사용자에게 승인 대기 상태의 역할을 할당합니다. 이미 할당이 있으면 그대로 둡니다.

        Raises:
            UserNotFoundError: 해당 ID의 프로필을 찾을 수 없을 때.
            RoleNotFoundError: 알 수 없는 역할 이름일 때.
        """
        role = self._require_role(role_name)
        self._require_user(user_id)

        assignment = self.user_role_repo.find(user_id, role.value)
        if assignment is None:
            assignment = self.user_role_repo.create(
                models.UserRole(user_id=user_id, role=role.value, is_approved=False)
            )
            LOGGER.info("Role '%s' requested for user %s", role.value, user_id)
        return {"user_id": user_id, "role": role.value, "is_approved": bool(assignment.is_approved)}

    def approve_role(self, user_id: str, role_name: str) -> Dict[str, Any]:
        """
        Raises:
            RoleNotFoundError: 알 수 없는 역할 이름일 때.
            RoleAssignmentNotFoundError: 해당 할당이 없을 때.
        """
        role = self._require_role(role_name)
        assignment = self._require_assignment(user_id, role)
        self.user_role_repo.set_approved(assignment, True)
        LOGGER.info("Role '%s' approved for user %s", role.value, user_id)
        return {"user_id": user_id, "role": role.value, "is_approved": True}

    def revoke_role(self, user_id: str, role_name: str) -> bool:
        role = self._require_role(role_name)
        assignment = self._require_assignment(user_id, role)
        self.user_role_repo.delete(assignment)
        LOGGER.info("Role '%s' revoked from user %s", role.value, user_id)
        return True

    def pending_count(self) -> int:
        return self.user_role_repo.count_pending()

    def _require_role(self, role_name: str) -> Role:
        role = parse_role(role_name)
        if role is None:
            raise RoleNotFoundError(f"Role '{role_name}' not found.")
        return role

    def _require_user(self, user_id: str) -> models.User:
        user = self.user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        return user

    def _require_assignment(self, user_id: str, role: Role) -> models.UserRole:
        assignment = self.user_role_repo.find(user_id, role.value)
        if not assignment:
            raise RoleAssignmentNotFoundError(f"User '{user_id}' has no '{role.value}' role assignment.")
        return assignment
