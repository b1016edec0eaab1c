from .auth_account import IAuthAccountRepository
from .user import IUserRepository
from .user_role import IUserRoleRepository
from .content import IContentRepository
from .magazine import IMagazineRepository, IMagazineReadRepository
