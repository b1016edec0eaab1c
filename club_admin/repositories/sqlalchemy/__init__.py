from .sqlalchemy_auth_account_repository import SqlalchemyAuthAccountRepository
from .sqlalchemy_user_repository import SqlalchemyUserRepository
from .sqlalchemy_user_role_repository import SqlalchemyUserRoleRepository
from .sqlalchemy_content_repository import SqlalchemyContentRepository
from .sqlalchemy_magazine_repository import SqlalchemyMagazineRepository, SqlalchemyMagazineReadRepository
