# club_admin/auth/permissions.py
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Union


class Role(str, Enum):
    """동아리 운영진이 가질 수 있는 역할. 빌드 시점에 고정된 닫힌 집합입니다."""
    BASKAN = "baskan"
    BASKAN_YARDIMCISI = "baskan_yardimcisi"
    TEKNIK_KOORDINATOR = "teknik_koordinator"
    TEKNIK_EKIP = "teknik_ekip"
    ETKINLIK_KOORDINATOR = "etkinlik_koordinator"
    ETKINLIK_EKIP = "etkinlik_ekip"
    ILETISIM_KOORDINATOR = "iletisim_koordinator"
    ILETISIM_EKIP = "iletisim_ekip"
    DERGI_KOORDINATOR = "dergi_koordinator"
    DERGI_EKIP = "dergi_ekip"
    MALI_KOORDINATOR = "mali_koordinator"
    MALI_EKIP = "mali_ekip"


class Permission(str, Enum):
    """관리 가능한 리소스 범주. 권한은 허용(positive)만 존재합니다."""
    NEWS = "news"
    EVENTS = "events"
    MAGAZINE = "magazine"
    SURVEYS = "surveys"
    SPONSORS = "sponsors"
    TEAM = "team"
    DOCUMENTS = "documents"
    INTERNSHIPS = "internships"
    MESSAGES = "messages"
    USERS = "users"
    PRODUCTS = "products"


RoleLike = Union[Role, str]
PermissionLike = Union[Permission, str]

_ALL = frozenset(Permission)

DEFAULT_ROLE_PERMISSIONS: Mapping[Role, FrozenSet[Permission]] = MappingProxyType({
    Role.BASKAN: _ALL,
    Role.BASKAN_YARDIMCISI: _ALL,
    Role.TEKNIK_KOORDINATOR: _ALL - {Permission.MESSAGES, Permission.PRODUCTS},
    Role.TEKNIK_EKIP: frozenset({
        Permission.NEWS, Permission.EVENTS, Permission.MAGAZINE, Permission.SURVEYS,
        Permission.SPONSORS, Permission.DOCUMENTS, Permission.INTERNSHIPS,
    }),
    Role.ETKINLIK_KOORDINATOR: frozenset({Permission.EVENTS, Permission.SPONSORS}),
    Role.ETKINLIK_EKIP: frozenset({Permission.EVENTS, Permission.SPONSORS}),
    Role.ILETISIM_KOORDINATOR: frozenset({
        Permission.NEWS, Permission.MAGAZINE, Permission.SURVEYS, Permission.SPONSORS,
        Permission.DOCUMENTS, Permission.INTERNSHIPS, Permission.MESSAGES,
    }),
    Role.ILETISIM_EKIP: frozenset({
        Permission.NEWS, Permission.MAGAZINE, Permission.SURVEYS, Permission.SPONSORS,
        Permission.DOCUMENTS, Permission.INTERNSHIPS,
    }),
    Role.DERGI_KOORDINATOR: frozenset({Permission.MAGAZINE, Permission.SPONSORS}),
    Role.DERGI_EKIP: frozenset({Permission.MAGAZINE, Permission.SPONSORS}),
    Role.MALI_KOORDINATOR: frozenset({Permission.PRODUCTS, Permission.SPONSORS}),
    Role.MALI_EKIP: frozenset({Permission.PRODUCTS}),
})

ROLE_LABELS: Mapping[Role, str] = MappingProxyType({
    Role.BASKAN: "Başkan",
    Role.BASKAN_YARDIMCISI: "Başkan Yardımcısı",
    Role.TEKNIK_KOORDINATOR: "Teknik İşler Koordinatörü",
    Role.TEKNIK_EKIP: "Teknik İşler Ekip Üyesi",
    Role.ETKINLIK_KOORDINATOR: "Etkinlik Koordinatörü",
    Role.ETKINLIK_EKIP: "Etkinlik Ekip Üyesi",
    Role.ILETISIM_KOORDINATOR: "İletişim Koordinatörü",
    Role.ILETISIM_EKIP: "İletişim Ekip Üyesi",
    Role.DERGI_KOORDINATOR: "Dergi Koordinatörü",
    Role.DERGI_EKIP: "Dergi Ekip Üyesi",
    Role.MALI_KOORDINATOR: "Mali İşler Koordinatörü",
    Role.MALI_EKIP: "Mali İşler Ekip Üyesi",
})


def parse_role(value: Optional[RoleLike]) -> Optional[Role]:
    """
    외부 서비스가 전달한 역할 문자열을 Role 열거형으로 변환합니다.

    매핑되지 않는 값은 예외 없이 None을 반환하며, 아무 권한도 부여하지 않는 것으로 취급됩니다.
    """
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value.strip())
    except ValueError:
        return None


def parse_permission(value: Optional[PermissionLike]) -> Optional[Permission]:
    if isinstance(value, Permission):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Permission(value.strip())
    except ValueError:
        return None


def role_label(roles: Iterable[RoleLike]) -> str:
    """역할 목록을 화면 표시용 라벨 문자열로 변환합니다. 알 수 없는 역할은 그대로 표시합니다."""
    labels = []
    for raw in roles:
        role = parse_role(raw)
        labels.append(ROLE_LABELS.get(role, str(raw)) if role else str(raw))
    return ", ".join(labels)


class AuthorizationResolver:
    """
    정적인 역할→권한 테이블을 보관하고, 사용자의 역할 집합으로부터 유효 권한을 계산합니다.

    테이블은 생성 시 명시적으로 주입되는 설정 값이며, 런타임에 변경되지 않습니다.
    여러 역할의 권한은 합집합으로 합산되고, 거부(deny) 권한은 존재하지 않습니다.
    """

    def __init__(self, table: Mapping[Role, Iterable[Permission]] = DEFAULT_ROLE_PERMISSIONS):
        self._table = MappingProxyType({
            role: frozenset(permissions) for role, permissions in table.items()
        })

    @property
    def table(self) -> Mapping[Role, FrozenSet[Permission]]:
        return self._table

    def permissions_for(self, roles: Iterable[RoleLike]) -> FrozenSet[Permission]:
        """
        역할 집합에 대한 유효 권한(각 역할 권한의 합집합)을 반환합니다.

        Args:
            roles: Role 또는 역할 문자열의 컬렉션. 비어 있어도 됩니다.

        Returns:
            권한의 frozenset. 테이블에 없는 역할은 아무 권한도 더하지 않습니다.
        """
        granted = set()
        for raw in roles:
            role = parse_role(raw)
            if role is None:
                continue
            granted.update(self._table.get(role, ()))
        return frozenset(granted)

    def has_permission(self, roles: Iterable[RoleLike], permission: PermissionLike) -> bool:
        perm = parse_permission(permission)
        if perm is None:
            return False
        return perm in self.permissions_for(roles)
