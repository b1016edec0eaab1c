import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from club_admin.auth import AuthorizationResolver, Permission, Role, parse_permission, parse_role, role_label
from club_admin.repositories.interfaces import IUserRepository, IUserRoleRepository
from club_admin.services.exceptions import LoginRequiredError
from club_admin.services.identity_service import IdentityService

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    """
    관리자 화면에 전달되는 명시적인 세션 컨텍스트입니다.

    roles에는 승인된 역할만 담기며, permissions는 그 역할들의 권한 합집합입니다.
    is_fallback이 True면 프로필 레코드가 없어 기본 역할이 부여된 세션입니다.
    """
    user_id: str
    email: str
    name: Optional[str]
    roles: FrozenSet[Role]
    permissions: FrozenSet[Permission]
    is_fallback: bool = False

    def has_permission(self, permission) -> bool:
        perm = parse_permission(permission)
        return perm is not None and perm in self.permissions

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def role_label(self) -> str:
        return role_label(sorted(self.roles, key=lambda r: r.value))


class SessionLoader:
    """인증된 신원과 승인된 역할 할당을 읽어 AdminSession을 구성합니다."""

    def __init__(
        self,
        identity_service: IdentityService,
        user_repo: IUserRepository,
        user_role_repo: IUserRoleRepository,
        resolver: AuthorizationResolver,
        fallback_role: Optional[Role] = Role.BASKAN,
    ):
        """
        Args:
            identity_service: 현재 사용자를 조회할 인증 서비스.
            user_repo: 프로필(users) 리포지토리.
            user_role_repo: 역할 할당(user_roles) 리포지토리.
            resolver: 역할→권한 계산기.
            fallback_role: 프로필이 없는 인증 사용자에게 부여할 역할. None이면 부여하지 않습니다.
        """
        self.identity_service = identity_service
        self.user_repo = user_repo
        self.user_role_repo = user_role_repo
        self.resolver = resolver
        self.fallback_role = fallback_role

    def load(self, token: Optional[str]) -> AdminSession:
        """
        토큰으로 현재 사용자의 세션을 구성합니다.

        Raises:
            LoginRequiredError: 인증된 사용자가 없을 때. 로그인 페이지로 리다이렉트해야 합니다.
        """
        identity = self.identity_service.get_user(token)
        if identity is None:
            raise LoginRequiredError("Authentication required.")

        profile = self.user_repo.find_by_id(identity.id)
        assignments = self.user_role_repo.list_for_user(identity.id, approved_only=True)

        if profile is None:
            return self._fallback_session(identity)

        roles = set()
        for assignment in assignments:
            role = parse_role(assignment.role)
            if role is None:
                LOGGER.warning("Ignoring unknown role '%s' assigned to user %s", assignment.role, identity.id)
                continue
            roles.add(role)

        return AdminSession(
            user_id=identity.id,
            email=identity.email,
            name=profile.name or identity.display_name,
            roles=frozenset(roles),
            permissions=self.resolver.permissions_for(roles),
        )

    def _fallback_session(self, identity) -> AdminSession:
        # 프로필이 없는 인증 사용자: 설정된 기본 역할을 부여합니다 (보안 검토 대상).
        roles = frozenset({self.fallback_role}) if self.fallback_role else frozenset()
        LOGGER.warning(
            "No profile for authenticated user %s; granting fallback roles %s",
            identity.id, [r.value for r in roles],
        )
        return AdminSession(
            user_id=identity.id,
            email=identity.email,
            name=identity.display_name,
            roles=roles,
            permissions=self.resolver.permissions_for(roles),
            is_fallback=True,
        )
