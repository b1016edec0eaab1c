# tests/services/test_role_service.py
import pytest
from unittest.mock import MagicMock, ANY

from club_admin.database import models
from club_admin.repositories.interfaces import IUserRepository, IUserRoleRepository
from club_admin.services.exceptions import (
    RoleAssignmentNotFoundError, RoleNotFoundError, UserCreationError, UserNotFoundError
)
from club_admin.services.role_service import RoleService

# ===================================================================
#  Fixture 설정
# ===================================================================

@pytest.fixture
def mock_user_repo() -> MagicMock:
    """IUserRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IUserRepository)

@pytest.fixture
def mock_user_role_repo() -> MagicMock:
    """IUserRoleRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IUserRoleRepository)

@pytest.fixture
def role_service(mock_user_repo: MagicMock, mock_user_role_repo: MagicMock) -> RoleService:
    return RoleService(mock_user_repo, mock_user_role_repo)

USER = models.User(id="u-1", email="zeynep@example.org", name="Zeynep")

# ===================================================================
#  역할 할당 테스트
# ===================================================================
class TestRoleAssignment:
    def test_request_role_creates_unapproved_assignment(self, role_service: RoleService, mock_user_repo: MagicMock, mock_user_role_repo: MagicMock):
        """역할 요청은 승인 대기(is_approved=False) 할당을 만듭니다."""
        # === Arrange ===
        mock_user_repo.find_by_id.return_value = USER
        mock_user_role_repo.find.return_value = None
        mock_user_role_repo.create.return_value = models.UserRole(user_id="u-1", role="dergi_ekip", is_approved=False)

        # === Act ===
        result = role_service.request_role("u-1", "dergi_ekip")

        # === Assert ===
        assert result == {"user_id": "u-1", "role": "dergi_ekip", "is_approved": False}
        mock_user_role_repo.create.assert_called_once_with(ANY)
        created = mock_user_role_repo.create.call_args.args[0]
        assert created.is_approved is False

    def test_request_existing_role_is_left_as_is(self, role_service: RoleService, mock_user_repo: MagicMock, mock_user_role_repo: MagicMock):
        mock_user_repo.find_by_id.return_value = USER
        mock_user_role_repo.find.return_value = models.UserRole(user_id="u-1", role="dergi_ekip", is_approved=True)

        result = role_service.request_role("u-1", "dergi_ekip")

        assert result["is_approved"] is True
        mock_user_role_repo.create.assert_not_called()

    def test_request_unknown_role(self, role_service: RoleService, mock_user_role_repo: MagicMock):
        with pytest.raises(RoleNotFoundError):
            role_service.request_role("u-1", "kral")
        mock_user_role_repo.create.assert_not_called()

    def test_request_role_for_missing_user(self, role_service: RoleService, mock_user_repo: MagicMock):
        mock_user_repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            role_service.request_role("ghost", "dergi_ekip")

    def test_approve_role(self, role_service: RoleService, mock_user_role_repo: MagicMock):
        # === Arrange ===
        pending = models.UserRole(user_id="u-1", role="etkinlik_ekip", is_approved=False)
        mock_user_role_repo.find.return_value = pending

        # === Act ===
        result = role_service.approve_role("u-1", "etkinlik_ekip")

        # === Assert ===
        assert result["is_approved"] is True
        mock_user_role_repo.set_approved.assert_called_once_with(pending, True)

    def test_approve_missing_assignment(self, role_service: RoleService, mock_user_role_repo: MagicMock):
        mock_user_role_repo.find.return_value = None

        with pytest.raises(RoleAssignmentNotFoundError):
            role_service.approve_role("u-1", "etkinlik_ekip")

    def test_revoke_role(self, role_service: RoleService, mock_user_role_repo: MagicMock):
        existing = models.UserRole(user_id="u-1", role="mali_ekip", is_approved=True)
        mock_user_role_repo.find.return_value = existing

        assert role_service.revoke_role("u-1", "mali_ekip") is True
        mock_user_role_repo.delete.assert_called_once_with(existing)

    def test_list_assignments_includes_labels(self, role_service: RoleService, mock_user_role_repo: MagicMock):
        mock_user_role_repo.list_all.return_value = [
            models.UserRole(user_id="u-1", role="baskan", is_approved=True),
            models.UserRole(user_id="u-2", role="legacy_role", is_approved=False),
        ]

        assignments = role_service.list_assignments()

        assert assignments[0]["label"] == "Başkan"
        # 알 수 없는 역할은 라벨 없이 그대로 표시합니다.
        assert assignments[1]["label"] == "legacy_role"
        assert assignments[1]["is_approved"] is False

    def test_pending_count(self, role_service: RoleService, mock_user_role_repo: MagicMock):
        mock_user_role_repo.count_pending.return_value = 3
        assert role_service.pending_count() == 3

# ===================================================================
#  프로필 관리 테스트
# ===================================================================
class TestProfiles:
    def test_create_profile(self, role_service: RoleService, mock_user_repo: MagicMock):
        mock_user_repo.find_by_id.return_value = None
        mock_user_repo.create.return_value = models.User(id="u-5", email="a@example.org", name="A")

        profile = role_service.create_profile("u-5", "a@example.org", "A")

        assert profile == {"id": "u-5", "email": "a@example.org", "name": "A"}

    def test_create_duplicate_profile(self, role_service: RoleService, mock_user_repo: MagicMock):
        mock_user_repo.find_by_id.return_value = USER

        with pytest.raises(UserCreationError):
            role_service.create_profile("u-1", "zeynep@example.org")
        mock_user_repo.create.assert_not_called()
