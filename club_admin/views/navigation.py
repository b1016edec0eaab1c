# club_admin/views/navigation.py
"""
관리자 화면의 탭과 버튼 노출 여부를 세션 권한으로 결정합니다.

여기서의 판단은 화면 구성용일 뿐 보안 경계가 아닙니다.
실제 접근 제어는 app.py의 각 핸들러가 데이터 접근 전에 다시 확인합니다.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from club_admin.auth import Permission
from club_admin.services.session_loader import AdminSession


@dataclass(frozen=True)
class Tab:
    key: str
    label: str
    permission: Optional[Permission] = None
    actions: Tuple[str, ...] = ("create", "edit", "delete")

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "label": self.label}


OVERVIEW_TAB = Tab("overview", "Genel", actions=())

TABS: Tuple[Tab, ...] = (
    OVERVIEW_TAB,
    Tab("users", "Roller", Permission.USERS, actions=("approve", "revoke")),
    Tab("news", "Haberler", Permission.NEWS),
    Tab("events", "Etkinlikler", Permission.EVENTS),
    Tab("magazine", "Dergi", Permission.MAGAZINE),
    Tab("surveys", "Anketler", Permission.SURVEYS),
    Tab("sponsors", "Sponsorlar", Permission.SPONSORS),
    Tab("products", "Ürünler", Permission.PRODUCTS, actions=()),
    Tab("team", "Ekipler", Permission.TEAM),
    Tab("documents", "Belgeler", Permission.DOCUMENTS),
    Tab("internships", "Staj", Permission.INTERNSHIPS),
    Tab("messages", "Mesajlar", Permission.MESSAGES, actions=("mark_read", "delete")),
)

_TABS_BY_KEY = {tab.key: tab for tab in TABS}


def can_see(session: AdminSession, tab: Tab) -> bool:
    return tab.permission is None or session.has_permission(tab.permission)


def visible_tabs(session: AdminSession) -> List[Tab]:
    """세션이 볼 수 있는 탭 목록. 개요(overview) 탭은 항상 첫 번째입니다."""
    return [tab for tab in TABS if can_see(session, tab)]


def action_buttons(session: AdminSession, tab_key: str) -> List[str]:
    """탭에 표시할 작업 버튼 목록. 권한이 없거나 알 수 없는 탭이면 빈 목록입니다."""
    tab = _TABS_BY_KEY.get(tab_key)
    if tab is None or not can_see(session, tab):
        return []
    return list(tab.actions)
