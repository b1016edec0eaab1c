import logging
import math
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from club_admin.database import models
from club_admin.repositories.interfaces import IMagazineReadRepository, IMagazineRepository
from club_admin.services.content_service import CollectionCache
from club_admin.services.exceptions import ItemNotFoundError, StorageError
from club_admin.storage import GitHubStorageClient
from club_admin.utils.records import coerce_fields, record_to_dict

LOGGER = logging.getLogger(__name__)

ISSUES = "magazine_issues"
READS = "magazine_reads"

_ISSUE_FIELDS = (
    "title", "description", "issue_number", "publication_date",
    "cover_image", "pdf_file", "slug", "published",
)
_DEVICES = ("mobile", "desktop", "tablet")


@dataclass
class DeleteReport:
    """잡지 삭제 결과. 스토리지 정리 실패는 기록만 되고 DB 삭제는 진행됩니다."""
    issue_id: str
    title: str
    deleted: bool = False
    storage_skipped: bool = False
    deleted_files: List[str] = field(default_factory=list)
    storage_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class MagazineService:
    """디지털 잡지 아카이브의 호(issue) 관리와 열람 통계를 담당합니다."""

    def __init__(
        self,
        magazine_repo: IMagazineRepository,
        read_repo: IMagazineReadRepository,
        storage: GitHubStorageClient,
        cache: CollectionCache,
    ):
        """
        MagazineService를 초기화합니다.

        Args:
            magazine_repo: 잡지 호 리포지토리.
            read_repo: 열람 기록 리포지토리.
            storage: PDF/표지 파일이 있는 오브젝트 스토리지 클라이언트.
            cache: 요청 범위의 컬렉션 캐시.
        """
        self.magazine_repo = magazine_repo
        self.read_repo = read_repo
        self.storage = storage
        self.cache = cache

    def list_issues(self) -> List[Dict[str, Any]]:
        """호수 내림차순으로 모든 잡지 호를 조회합니다."""
        return self.cache.get(ISSUES, lambda: [record_to_dict(i) for i in self.magazine_repo.list_all()])

    def save_issue(
        self,
        data: Dict[str, Any],
        issue_id: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        잡지 호를 저장합니다.

        issue_id가 있으면 해당 호를 수정합니다. 없으면 같은 호수의 기존 레코드가 있는지 확인해
        있으면 그 레코드를 갱신하고, 없으면 새로 추가합니다.

        Returns:
            {"issue": 저장된 호, "created": 새로 추가되었는지 여부}

        Raises:
            ValueError: 필드 값이 잘못되었거나 새 호에 issue_number가 없을 때.
            ItemNotFoundError: 수정할 호가 없을 때.
        """
        if issue_id is not None:
            fields = coerce_fields(models.MagazineIssue, data)
            issue = self._find(issue_id)
            issue = self.magazine_repo.update(issue, fields)
            LOGGER.info("Updated magazine issue %s", issue_id)
            self.cache.invalidate(ISSUES)
            return {"issue": record_to_dict(issue), "created": False}

        clean = {key: data.get(key) for key in _ISSUE_FIELDS}
        if clean["published"] is None:
            clean["published"] = False
        clean = coerce_fields(models.MagazineIssue, clean)
        if clean.get("issue_number") is None:
            raise ValueError("Field 'issue_number' is required.")
        clean["created_by"] = actor_id

        existing = self.magazine_repo.find_by_issue_number(clean["issue_number"])
        if existing:
            issue = self.magazine_repo.update(existing, clean)
            created = False
            LOGGER.info("Issue %s already existed; updated in place", clean["issue_number"])
        else:
            issue = self.magazine_repo.create(clean)
            created = True
            LOGGER.info("Created magazine issue %s", clean["issue_number"])

        self.cache.invalidate(ISSUES)
        return {"issue": record_to_dict(issue), "created": created}

    def delete_issue(self, issue_id: str) -> DeleteReport:
        """
        잡지 호를 삭제합니다. 스토리지의 PDF와 표지 삭제는 최선 노력(best-effort)으로 수행하며,
        그 실패는 보고서에 기록될 뿐 DB 삭제를 막지 않습니다.

        Raises:
            ItemNotFoundError: 해당 ID의 호가 없을 때.
        """
        issue = self._find(issue_id)
        report = DeleteReport(issue_id=issue.id, title=issue.title)

        if not self.storage.is_configured():
            LOGGER.info("Object storage not configured; deleting issue %s from database only", issue_id)
            report.storage_skipped = True
        else:
            try:
                result = self.storage.delete_files_by_urls(issue.pdf_file, issue.cover_image, issue.issue_number)
                report.deleted_files = list(result.deleted_files)
                if not result.success:
                    report.storage_error = result.error
                    LOGGER.warning("Storage cleanup failed for issue %s: %s", issue_id, result.error)
            except (StorageError, requests.RequestException) as e:
                report.storage_error = str(e)
                LOGGER.error("Storage connection error for issue %s: %s", issue_id, e)

        self.magazine_repo.delete(issue)
        report.deleted = True
        LOGGER.info("Deleted magazine issue %s", issue_id)
        self.cache.invalidate(ISSUES)
        self.cache.invalidate(READS)
        return report

    def list_reads(self) -> List[Dict[str, Any]]:
        return self.cache.get(READS, lambda: [record_to_dict(r) for r in self.read_repo.list_all()])

    def magazine_stats(self, now: datetime) -> Dict[str, Any]:
        """
        전체 열람 통계를 계산합니다.

        Returns:
            this_month(이번 달 열람 수), total, avg_duration(분), device_stats(기기별 비율 %).
        """
        reads = self.list_reads()
        total = len(reads)
        month_start = datetime(now.year, now.month, 1)
        this_month = 0
        for read in reads:
            created = read.get("created_at")
            if created and datetime.fromisoformat(created).replace(tzinfo=None) >= month_start:
                this_month += 1

        device_counts = {}
        for read in reads:
            device = (read.get("device_type") or "desktop").lower()
            device_counts[device] = device_counts.get(device, 0) + 1
        device_stats = {
            device: _round_half_up(device_counts.get(device, 0) / total * 100) if total else 0
            for device in _DEVICES
        }

        return {
            "this_month": this_month,
            "total": total,
            "avg_duration": self._avg_minutes(reads),
            "device_stats": device_stats,
        }

    def issue_read_stats(self, issue_id: str) -> Dict[str, int]:
        reads = [r for r in self.list_reads() if r.get("magazine_issue_id") == issue_id]
        return {"reads": len(reads), "avg_duration": self._avg_minutes(reads)}

    @staticmethod
    def _avg_minutes(reads: List[Dict[str, Any]]) -> int:
        if not reads:
            return 0
        seconds = sum(r.get("reading_duration") or 0 for r in reads)
        return _round_half_up(seconds / len(reads) / 60)

    def _find(self, issue_id: str) -> models.MagazineIssue:
        issue = self.magazine_repo.find_by_id(issue_id)
        if not issue:
            raise ItemNotFoundError(f"Magazine issue '{issue_id}' not found.")
        return issue
