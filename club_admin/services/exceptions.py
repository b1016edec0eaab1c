# club_admin/services/exceptions.py

# --- General Exceptions ---
class ItemNotFoundError(Exception):
    """컬렉션에서 레코드를 찾을 수 없을 때"""
    pass

class UserNotFoundError(Exception):
    """사용자 프로필을 찾을 수 없을 때"""
    pass

class RoleNotFoundError(Exception):
    """알 수 없는 역할 이름일 때"""
    pass

class RoleAssignmentNotFoundError(Exception):
    """사용자에게 해당 역할 할당이 없을 때"""
    pass

class UnknownCollectionError(Exception):
    """관리 대상이 아닌 컬렉션 이름일 때"""
    pass

# --- Creation/Validation Exceptions ---
class AccountCreationError(Exception):
    """인증 계정 생성 실패 시"""
    pass

class UserCreationError(Exception):
    """사용자 프로필 생성 실패 시"""
    pass

# --- Auth Exceptions ---
class LoginRequiredError(Exception):
    """인증된 세션이 없어 로그인 페이지로 보내야 할 때"""
    pass

class AuthenticationError(Exception):
    """사용자 자격 증명 실패 시"""
    pass

class PermissionDeniedError(Exception):
    """세션에 요청한 리소스 권한이 없을 때"""
    pass

# --- Storage Exceptions ---
class StorageError(Exception):
    """오브젝트 스토리지 호출 실패 시. DB 삭제를 막지 않습니다."""
    pass
