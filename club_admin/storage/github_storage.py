"""
GitHub 저장소를 오브젝트 스토리지로 사용하는 클라이언트입니다.

잡지 PDF와 표지 이미지는 GitHub 저장소에 올라가 있고, DB에는 그 URL만 저장됩니다.
이 모듈은 URL을 저장소 내부 경로로 바꾸고 GitHub contents API로 파일을 삭제합니다.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import unquote, urlparse

import requests

from club_admin.services.exceptions import StorageError

LOGGER = logging.getLogger(__name__)

_RAW_HOST = "raw.githubusercontent.com"
_WEB_HOSTS = ("github.com", "www.github.com")


@dataclass(frozen=True)
class GitHubStorageConfig:
    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: str = "main"
    token: Optional[str] = None
    api_url: str = "https://api.github.com"
    timeout: int = 10

    @property
    def is_configured(self) -> bool:
        return bool(self.owner and self.repo and self.token)


@dataclass
class StorageDeleteResult:
    success: bool
    deleted_files: List[str] = field(default_factory=list)
    error: Optional[str] = None


class GitHubStorageClient:
    """
    GitHub contents API로 업로드된 파일을 삭제합니다.

    Args:
        config: 저장소 좌표와 토큰.
        session: 주입할 requests 세션. 생략하면 새로 만듭니다.
    """

    def __init__(self, config: GitHubStorageConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        if config.token:
            self.session.headers.update({
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
            })

    def is_configured(self) -> bool:
        return self.config.is_configured

    def path_from_url(self, url: Optional[str]) -> Optional[str]:
        """
        파일 URL을 저장소 내부 경로로 변환합니다.

        Returns:
            저장소 경로. URL이 비어 있거나 다른 저장소를 가리키면 None.
        """
        if not url:
            return None
        parsed = urlparse(url.strip())
        if not parsed.scheme:
            return unquote(parsed.path.lstrip("/")) or None

        parts = [p for p in parsed.path.split("/") if p]
        if parsed.netloc == _RAW_HOST:
            # /{owner}/{repo}/{branch}/{path...}
            if len(parts) < 4:
                return None
            owner, repo, path_parts = parts[0], parts[1], parts[3:]
        elif parsed.netloc in _WEB_HOSTS:
            # /{owner}/{repo}/blob|raw/{branch}/{path...}
            if len(parts) < 5 or parts[2] not in ("blob", "raw"):
                return None
            owner, repo, path_parts = parts[0], parts[1], parts[4:]
        else:
            return None

        if owner.lower() != (self.config.owner or "").lower() or repo.lower() != (self.config.repo or "").lower():
            return None
        return unquote("/".join(path_parts))

    def delete_file(self, path: str, message: str) -> bool:
        """
        저장소에서 파일 하나를 삭제합니다.

        Returns:
            삭제했으면 True, 이미 없는 파일이면 False.

        Raises:
            StorageError: GitHub API 호출이 실패했을 때.
        """
        url = f"{self.config.api_url.rstrip('/')}/repos/{self.config.owner}/{self.config.repo}/contents/{path}"
        try:
            response = self.session.get(url, params={"ref": self.config.branch}, timeout=self.config.timeout)
            if response.status_code == 404:
                LOGGER.info("Storage file already absent: %s", path)
                return False
            response.raise_for_status()
            sha = response.json().get("sha")
            if not sha:
                raise StorageError(f"No blob SHA returned for '{path}'.")

            response = self.session.delete(
                url,
                json={"message": message, "sha": sha, "branch": self.config.branch},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise StorageError(f"Failed to delete '{path}': {e}") from e
        return True

    def delete_files_by_urls(
        self,
        pdf_url: Optional[str] = None,
        cover_url: Optional[str] = None,
        issue_number: Optional[int] = None,
    ) -> StorageDeleteResult:
        """
        잡지 한 호의 PDF와 표지 파일을 삭제합니다. 한 파일의 실패가 다른 파일 삭제를 막지 않습니다.

        Returns:
            삭제된 경로 목록과, 실패가 있었다면 오류 메시지를 담은 결과.
        """
        if not self.is_configured():
            return StorageDeleteResult(success=False, error="GitHub storage is not configured.")

        label = f"issue {issue_number}" if issue_number is not None else "magazine"
        deleted, errors = [], []
        for url in (pdf_url, cover_url):
            path = self.path_from_url(url)
            if path is None:
                if url:
                    LOGGER.warning("Skipping storage URL outside configured repository: %s", url)
                continue
            try:
                if self.delete_file(path, f"Delete {path} ({label})"):
                    deleted.append(path)
            except StorageError as e:
                LOGGER.error("%s", e)
                errors.append(str(e))

        return StorageDeleteResult(
            success=not errors,
            deleted_files=deleted,
            error="; ".join(errors) if errors else None,
        )
