from .permissions import (
    Role,
    Permission,
    AuthorizationResolver,
    DEFAULT_ROLE_PERMISSIONS,
    ROLE_LABELS,
    parse_role,
    parse_permission,
    role_label,
)
