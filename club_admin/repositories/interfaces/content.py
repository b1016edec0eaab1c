from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

class IContentRepository(ABC):
    """
    뉴스, 행사, 설문 등 단일 테이블 콘텐츠에 대한 공통 CRUD 리포지토리입니다.
    구현체는 생성 시 대상 모델 클래스를 받습니다.
    """
    @abstractmethod
    def list_all(self) -> List[Any]:
        """컬렉션의 모든 레코드를 표시 순서대로 조회합니다."""
        pass

    @abstractmethod
    def find_by_id(self, item_id: str) -> Optional[Any]:
        """고유 ID로 레코드를 조회합니다."""
        pass

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> Any:
        """주어진 필드 값으로 새 레코드를 생성합니다."""
        pass

    @abstractmethod
    def update(self, record: Any, fields: Dict[str, Any]) -> Any:
        """기존 레코드의 필드를 갱신합니다."""
        pass

    @abstractmethod
    def delete(self, record: Any) -> bool:
        """레코드를 삭제합니다."""
        pass
