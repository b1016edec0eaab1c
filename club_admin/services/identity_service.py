import hashlib
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from club_admin.database import models
from club_admin.repositories.interfaces import IAuthAccountRepository
from club_admin.services.exceptions import AccountCreationError, AuthenticationError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthIdentity:
    """인증 서브시스템이 돌려주는 현재 로그인 사용자 정보입니다."""
    id: str
    email: str
    display_name: Optional[str] = None


class TokenStore:
    """
    발급된 세션 토큰을 보관합니다.
    애플리케이션마다 하나를 만들어 IdentityService에 주입합니다.
    """

    def __init__(self, expire_minutes: int = 60, clock=datetime.now):
        self.expire_minutes = expire_minutes
        self._clock = clock
        self._tokens: Dict[str, Dict[str, Any]] = {}

    def issue(self, account_id: str) -> Dict[str, Any]:
        """새 토큰을 발급합니다. 발급할 때마다 만료된 토큰을 정리합니다."""
        now = self._clock()
        self._sweep(now)
        token = str(uuid.uuid4())
        expires_at = now + timedelta(minutes=self.expire_minutes)
        self._tokens[token] = {"account_id": account_id, "expires_at": expires_at}
        return {"token": token, "expires_at": expires_at}

    def lookup(self, token: str) -> Optional[str]:
        """유효한 토큰이면 계정 ID를, 없거나 만료되었으면 None을 반환합니다. 만료된 토큰은 제거합니다."""
        data = self._tokens.get(token)
        if not data:
            return None
        if self._clock() > data["expires_at"]:
            del self._tokens[token]
            return None
        return data["account_id"]

    def revoke(self, token: str) -> bool:
        return self._tokens.pop(token, None) is not None

    def _sweep(self, now: datetime) -> None:
        expired = [token for token, data in self._tokens.items() if now > data["expires_at"]]
        for token in expired:
            del self._tokens[token]

    def __len__(self) -> int:
        return len(self._tokens)


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode('utf-8')).hexdigest()


class IdentityService:
    """로그인 계정의 생성, 로그인, 현재 사용자 조회, 로그아웃을 담당하는 인증 서비스입니다."""

    def __init__(self, account_repo: IAuthAccountRepository, token_store: TokenStore):
        """
        IdentityService를 초기화합니다.

        Args:
            account_repo: 인증 계정에 접근하기 위한 리포지토리.
            token_store: 세션 토큰 저장소. 요청마다 새로 만들지 않고 공유합니다.
        """
        self.account_repo = account_repo
        self.token_store = token_store

    def sign_up(self, email: str, password: str, display_name: Optional[str] = None) -> Dict[str, Any]:
        """
        새 인증 계정을 생성합니다. 비밀번호는 해시하여 저장합니다.
        프로필(users) 레코드는 만들지 않습니다.

        Raises:
            AccountCreationError: 동일한 이메일의 계정이 이미 존재할 때.
            ValueError: 이메일이나 비밀번호가 비어 있을 때.
        """
        if not email or not password:
            raise ValueError("Email and password are required.")
        if self.account_repo.find_by_email(email):
            raise AccountCreationError(f"Account with email '{email}' already exists.")

        account = models.AuthAccount(email=email, password_hash=hash_password(password), display_name=display_name)
        created = self.account_repo.create(account)
        LOGGER.info("Auth account created: %s", created.id)
        return {"id": created.id, "email": created.email}

    def sign_in(self, email: str, password: str) -> Dict[str, str]:
        """
        자격증명을 검증하고, 성공 시 세션 토큰을 발급합니다.

        Raises:
            AuthenticationError: 이메일 또는 비밀번호가 올바르지 않을 때.
        """
        account = self.account_repo.find_by_email(email) if email else None
        if not account or account.password_hash != hash_password(password or ""):
            raise AuthenticationError("Invalid email or password.")

        issued = self.token_store.issue(account.id)
        return {"token": issued["token"], "expires_at": issued["expires_at"].isoformat()}

    def get_user(self, token: Optional[str]) -> Optional[AuthIdentity]:
        """
        토큰에 해당하는 현재 사용자를 반환합니다.

        Returns:
            AuthIdentity, 또는 토큰이 없거나 만료되었거나 계정이 사라졌으면 None.
        """
        if not token:
            return None
        account_id = self.token_store.lookup(token)
        if account_id is None:
            return None
        account = self.account_repo.find_by_id(account_id)
        if not account:
            self.token_store.revoke(token)
            return None
        return AuthIdentity(id=account.id, email=account.email, display_name=account.display_name)

    def sign_out(self, token: Optional[str]) -> None:
        if token and self.token_store.revoke(token):
            LOGGER.info("Session token revoked")
