from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from club_admin.repositories.interfaces import IContentRepository

class SqlalchemyContentRepository(IContentRepository):
    """
    모델 클래스 하나에 대한 범용 CRUD 리포지토리입니다.

    Args:
        db_session: 요청 범위의 SQLAlchemy 세션.
        model: 대상 모델 클래스 (예: models.News).
        order_by: 목록 정렬 기준 컬럼 표현식들. 생략하면 created_at 내림차순입니다.
    """
    def __init__(self, db_session: Session, model, order_by=None):
        self.db = db_session
        self.model = model
        self.order_by = order_by if order_by is not None else (model.created_at.desc(),)

    def list_all(self) -> List[Any]:
        return self.db.query(self.model).order_by(*self.order_by).all()

    def find_by_id(self, item_id: str) -> Optional[Any]:
        return self.db.query(self.model).filter(self.model.id == item_id).first()

    def create(self, fields: Dict[str, Any]) -> Any:
        record = self.model(**fields)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update(self, record: Any, fields: Dict[str, Any]) -> Any:
        for key, value in fields.items():
            setattr(record, key, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record: Any) -> bool:
        if record:
            self.db.delete(record)
            self.db.commit()
            return True
        return False
