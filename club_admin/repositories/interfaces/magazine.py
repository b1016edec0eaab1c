from abc import abstractmethod
from typing import Optional
from club_admin.database import models
from .content import IContentRepository

class IMagazineRepository(IContentRepository):
    @abstractmethod
    def find_by_issue_number(self, issue_number: int) -> Optional[models.MagazineIssue]:
        """호수(issue_number)로 잡지 호를 조회합니다."""
        pass

class IMagazineReadRepository(IContentRepository):
    """잡지 열람 기록(magazine_reads) 리포지토리. 통계는 서비스에서 전체 목록으로 계산합니다."""
