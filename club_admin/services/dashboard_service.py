from typing import Any, Dict, List

from club_admin.services.content_service import ContentService
from club_admin.services.magazine_service import MagazineService
from club_admin.services.role_service import RoleService
from club_admin.services.session_loader import AdminSession
from club_admin.views.navigation import action_buttons, visible_tabs

# (제목, 컬렉션) 순서대로 통계 타일을 만듭니다.
_COUNT_TILES = (
    ("Toplam Haberler", "news"),
    ("Toplam Etkinlikler", "events"),
    ("Toplam Dergi Sayıları", "magazine_issues"),
    ("Toplam Anketler", "surveys"),
    ("Toplam Sponsorlar", "sponsors"),
    ("Toplam Ekipler", "team_members"),
    ("Toplam Belgeler", "academic_documents"),
    ("Toplam Staj İlanları", "internships"),
    ("Toplam Mesajlar", "contact_messages"),
)


class DashboardService:
    """관리자 개요 화면(헤더, 탭, 통계 타일, 요약 카드)을 구성합니다."""

    def __init__(self, content_service: ContentService, magazine_service: MagazineService, role_service: RoleService):
        self.content_service = content_service
        self.magazine_service = magazine_service
        self.role_service = role_service

    def _items(self, collection: str) -> List[Dict[str, Any]]:
        if collection == "magazine_issues":
            return self.magazine_service.list_issues()
        return self.content_service.list_items(collection)

    def pending_count(self, category: str) -> int:
        """
        범주별 처리 대기 건수를 반환합니다.

        news/magazines: 미게시 항목, users: 승인 대기 역할, contact: 읽지 않은 메시지.
        그 외 범주는 0입니다.
        """
        if category == "news":
            return sum(1 for item in self._items("news") if not item.get("published"))
        if category == "magazines":
            return sum(1 for item in self._items("magazine_issues") if not item.get("published"))
        if category == "users":
            return self.role_service.pending_count()
        if category == "contact":
            return sum(1 for msg in self._items("contact_messages") if msg.get("status") == "unread")
        return 0

    def overview(self, session: AdminSession) -> Dict[str, Any]:
        collections = {name: self._items(name) for _, name in _COUNT_TILES}
        pending_roles = self.pending_count("users")

        stats = [
            {"title": "Toplam Kullanıcı", "value": len(self.role_service.list_users())},
            {"title": "Bekleyen Roller", "value": pending_roles, "change": f"{pending_roles} beklemede"},
        ]
        stats.extend({"title": title, "value": len(collections[name])} for title, name in _COUNT_TILES)

        news = collections["news"]
        events = collections["events"]
        issues = collections["magazine_issues"]
        messages = collections["contact_messages"]
        cards = [
            {"title": "Toplam Haberler", "value": len(news),
             "detail": f"{sum(1 for n in news if n.get('published'))} yayında"},
            {"title": "Toplam Etkinlikler", "value": len(events),
             "detail": f"{sum(1 for e in events if e.get('status') == 'upcoming')} yaklaşan"},
            {"title": "Dergi Sayıları", "value": len(issues),
             "detail": f"{sum(1 for m in issues if m.get('published'))} yayında"},
            {"title": "Mesajlar", "value": len(messages),
             "detail": f"{sum(1 for m in messages if m.get('status') == 'unread')} okunmamış"},
        ]

        tabs = visible_tabs(session)
        return {
            "user": {
                "id": session.user_id,
                "display_name": session.display_name,
                "role_label": session.role_label,
                "is_fallback": session.is_fallback,
            },
            "tabs": [dict(tab.to_dict(), actions=action_buttons(session, tab.key)) for tab in tabs],
            "permissions": sorted(p.value for p in session.permissions),
            "stats": stats,
            "cards": cards,
        }
