import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from club_admin.auth import Permission
from club_admin.database import models
from club_admin.repositories.interfaces import IContentRepository
from club_admin.services.exceptions import ItemNotFoundError, UnknownCollectionError
from club_admin.utils.records import coerce_fields, record_to_dict

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionSpec:
    """관리 화면에서 다루는 컬렉션 하나의 정의입니다."""
    name: str
    model: Any
    permission: Permission
    owner_field: Optional[str] = None
    order_field: Optional[str] = None


COLLECTIONS: Mapping[str, CollectionSpec] = MappingProxyType({
    spec.name: spec for spec in (
        CollectionSpec("news", models.News, Permission.NEWS, owner_field="author_id"),
        CollectionSpec("events", models.Event, Permission.EVENTS, owner_field="created_by"),
        CollectionSpec("surveys", models.Survey, Permission.SURVEYS, owner_field="created_by"),
        CollectionSpec("sponsors", models.Sponsor, Permission.SPONSORS, order_field="display_order"),
        CollectionSpec("team_members", models.TeamMember, Permission.TEAM, order_field="display_order"),
        CollectionSpec("academic_documents", models.AcademicDocument, Permission.DOCUMENTS),
        CollectionSpec("internships", models.Internship, Permission.INTERNSHIPS),
        CollectionSpec("contact_messages", models.ContactMessage, Permission.MESSAGES),
    )
})


def get_collection(name: str) -> CollectionSpec:
    """
    Raises:
        UnknownCollectionError: 등록되지 않은 컬렉션 이름일 때.
    """
    spec = COLLECTIONS.get(name)
    if spec is None:
        raise UnknownCollectionError(f"Unknown collection '{name}'.")
    return spec


class CollectionCache:
    """
    요청 하나 동안 컬렉션 이름별로 직렬화된 레코드 목록을 보관합니다.
    변경이 성공하면 해당 컬렉션만 무효화하고, 다음 조회에서 다시 읽어옵니다.
    반환값은 항목 딕셔너리까지 복사한 것이라 호출자가 수정해도 캐시는 바뀌지 않습니다.
    """

    def __init__(self):
        self._entries: Dict[str, List[Dict[str, Any]]] = {}

    def get(self, collection: str, loader: Callable[[], List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        cached = self._entries.get(collection)
        if cached is not None:
            return [dict(row) for row in cached]
        fresh = loader()
        self._entries[collection] = [dict(row) for row in fresh]
        return [dict(row) for row in fresh]

    def invalidate(self, collection: str) -> None:
        self._entries.pop(collection, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, collection: str) -> bool:
        return collection in self._entries


class ContentService:
    """뉴스, 행사, 설문, 스폰서, 팀, 문서, 인턴십, 문의 메시지의 CRUD를 담당합니다."""

    def __init__(self, repositories: Mapping[str, IContentRepository], cache: CollectionCache):
        """
        Args:
            repositories: 컬렉션 이름 → 리포지토리.
            cache: 요청 범위의 컬렉션 캐시.
        """
        self.repositories = repositories
        self.cache = cache

    def _repo(self, collection: str) -> IContentRepository:
        get_collection(collection)
        repo = self.repositories.get(collection)
        if repo is None:
            raise UnknownCollectionError(f"No repository configured for '{collection}'.")
        return repo

    def list_items(self, collection: str) -> List[Dict[str, Any]]:
        repo = self._repo(collection)
        return self.cache.get(collection, lambda: [record_to_dict(r) for r in repo.list_all()])

    def get_item(self, collection: str, item_id: str) -> Dict[str, Any]:
        record = self._find(collection, item_id)
        return record_to_dict(record)

    def save_item(
        self,
        collection: str,
        data: Dict[str, Any],
        item_id: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        item_id가 없으면 새 레코드를 만들고, 있으면 기존 레코드를 갱신합니다.

        Args:
            collection: 컬렉션 이름.
            data: 저장할 필드 값.
            item_id: 수정할 레코드 ID. None이면 생성합니다.
            actor_id: 작성자 ID. 생성 시 컬렉션의 소유자 컬럼에 기록됩니다.

        Returns:
            저장된 레코드의 딕셔너리.

        Raises:
            ValueError: 알 수 없는 필드나 잘못된 값이 있을 때.
            ItemNotFoundError: 수정할 레코드가 없을 때.
        """
        spec = get_collection(collection)
        repo = self._repo(collection)
        fields = coerce_fields(spec.model, data)

        if item_id is None:
            if spec.owner_field and actor_id:
                fields[spec.owner_field] = actor_id
            record = repo.create(fields)
            LOGGER.info("Created %s item %s", collection, record.id)
        else:
            record = self._find(collection, item_id)
            record = repo.update(record, fields)
            LOGGER.info("Updated %s item %s", collection, item_id)

        self.cache.invalidate(collection)
        return record_to_dict(record)

    def delete_item(self, collection: str, item_id: str) -> bool:
        record = self._find(collection, item_id)
        self._repo(collection).delete(record)
        LOGGER.info("Deleted %s item %s", collection, item_id)
        self.cache.invalidate(collection)
        return True

    def mark_message_read(self, message_id: str) -> Dict[str, Any]:
        """문의 메시지를 읽음(read) 상태로 바꿉니다."""
        return self.save_item("contact_messages", {"status": "read"}, item_id=message_id)

    def _find(self, collection: str, item_id: str):
        record = self._repo(collection).find_by_id(item_id)
        if not record:
            raise ItemNotFoundError(f"Item '{item_id}' not found in '{collection}'.")
        return record
