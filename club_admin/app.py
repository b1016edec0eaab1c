# club_admin/app.py
from wsgiref.simple_server import make_server
from datetime import datetime
import json
import logging
import re
import sys

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from club_admin.auth import Permission
from club_admin.config import AppConfig, configure_logging, load_config_from_env
from club_admin.database import create_db_engine, create_session_factory
from club_admin.repositories.sqlalchemy import (
    SqlalchemyAuthAccountRepository,
    SqlalchemyContentRepository,
    SqlalchemyMagazineReadRepository,
    SqlalchemyMagazineRepository,
    SqlalchemyUserRepository,
    SqlalchemyUserRoleRepository,
)
from club_admin.services.content_service import COLLECTIONS, CollectionCache, ContentService, get_collection
from club_admin.services.dashboard_service import DashboardService
from club_admin.services.identity_service import IdentityService, TokenStore
from club_admin.services.magazine_service import MagazineService
from club_admin.services.role_service import RoleService
from club_admin.services.session_loader import SessionLoader
from club_admin.services.survey_page_service import SurveyPageService
from club_admin.services.exceptions import *
from club_admin.storage import GitHubStorageClient

LOGGER = logging.getLogger(__name__)

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        data = json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, json.JSONDecodeError):
        raise ValueError("Invalid or missing JSON body.")
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object.")
    return data

def get_token(environ):
    return environ.get('HTTP_X_AUTH_TOKEN')

def authorize(environ, permission=None):
    """
    현재 요청의 세션을 불러오고, permission이 주어지면 해당 권한을 확인합니다.

    Raises:
        LoginRequiredError: 인증된 세션이 없을 때.
        PermissionDeniedError: 세션에 권한이 없을 때.
    """
    session = environ['session_loader'].load(get_token(environ))
    if permission is not None and not session.has_permission(permission):
        raise PermissionDeniedError(f"Missing '{Permission(permission).value}' permission.")
    return session

def authorize_collection(environ, collection):
    """
    로그인 여부를 먼저 확인한 뒤 컬렉션 이름과 권한을 검사합니다.
    비로그인 요청은 컬렉션 존재 여부와 관계없이 로그인 페이지로 리다이렉트됩니다.
    """
    session = authorize(environ)
    permission = get_collection(collection).permission
    if not session.has_permission(permission):
        raise PermissionDeniedError(f"Missing '{permission.value}' permission.")
    return session

ERROR_MAP = {
    AuthenticationError: "401 Unauthorized",
    PermissionDeniedError: "403 Forbidden",
    ItemNotFoundError: "404 Not Found",
    UserNotFoundError: "404 Not Found",
    RoleNotFoundError: "404 Not Found",
    RoleAssignmentNotFoundError: "404 Not Found",
    UnknownCollectionError: "404 Not Found",
    ValueError: "400 Bad Request",
    AccountCreationError: "400 Bad Request",
    UserCreationError: "400 Bad Request",
    IntegrityError: "400 Bad Request",
}

def handle_exception(e, login_path):
    """예외를 (status, body, headers)로 변환합니다. 인증 부재는 오류가 아닌 리다이렉트입니다."""
    if isinstance(e, LoginRequiredError):
        return "302 Found", json.dumps({"redirect": login_path}), [("Location", login_path)]

    status = None
    for exc_type in type(e).__mro__:
        status = ERROR_MAP.get(exc_type)
        if status:
            break
    if status is None:
        status = "500 Internal Server Error"
        if isinstance(e, SQLAlchemyError):
            LOGGER.error("Data service call failed: %s", e)
        else:
            LOGGER.exception("Unhandled error while processing request")
    else:
        LOGGER.info("Request failed (%s): %s", status, e)
    return status, json.dumps({"error": str(e)}), []

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

def build_content_repositories(db_session):
    repositories = {}
    for name, spec in COLLECTIONS.items():
        order_by = None
        if spec.order_field:
            order_by = (getattr(spec.model, spec.order_field).asc(), spec.model.created_at.desc())
        repositories[name] = SqlalchemyContentRepository(db_session, spec.model, order_by)
    return repositories

def create_application(config: AppConfig, session_factory):
    """
    설정과 세션 팩토리로 WSGI 애플리케이션을 만듭니다.

    토큰 저장소와 스토리지 클라이언트는 애플리케이션 단위로 공유되고,
    DB 세션, 컬렉션 캐시, 리포지토리/서비스는 요청마다 새로 만듭니다.
    """
    token_store = TokenStore(expire_minutes=config.token_expire_minutes)
    storage = GitHubStorageClient(config.storage_config)

    def application(environ, start_response):
        db_session = session_factory()
        cache = CollectionCache()
        headers = [("Content-Type", "application/json")]
        try:
            # 1. 의존성 생성 (Repositories -> Services)
            user_repo = SqlalchemyUserRepository(db_session)
            user_role_repo = SqlalchemyUserRoleRepository(db_session)
            account_repo = SqlalchemyAuthAccountRepository(db_session)
            magazine_repo = SqlalchemyMagazineRepository(db_session)
            read_repo = SqlalchemyMagazineReadRepository(db_session)

            identity_service = IdentityService(account_repo, token_store)
            content_service = ContentService(build_content_repositories(db_session), cache)
            magazine_service = MagazineService(magazine_repo, read_repo, storage, cache)
            role_service = RoleService(user_repo, user_role_repo)

            # 2. 생성된 서비스 객체들을 environ을 통해 핸들러에 전달
            environ['services'] = {
                'identity': identity_service,
                'content': content_service,
                'magazine': magazine_service,
                'roles': role_service,
                'dashboard': DashboardService(content_service, magazine_service, role_service),
                'survey_page': SurveyPageService(content_service),
            }
            environ['session_loader'] = SessionLoader(
                identity_service, user_repo, user_role_repo, config.resolver, config.fallback_role
            )

            # 3. 라우팅 및 핸들러 실행
            path = environ.get("PATH_INFO", "")
            method = environ.get("REQUEST_METHOD", "")

            handler, path_args = None, []
            for route_method, pattern, route_handler in ROUTES:
                if method == route_method and (match := re.match(pattern, path)):
                    handler, path_args = route_handler, match.groups()
                    break

            if handler:
                status, response_body = handler(environ, *path_args)
            else:
                status, response_body = '404 Not Found', json.dumps({'error': 'Not Found'})

        except Exception as e:
            db_session.rollback()
            status, response_body, extra_headers = handle_exception(e, config.login_path)
            headers.extend(extra_headers)
        finally:
            db_session.close()

        start_response(status, headers)
        return [response_body.encode("utf-8")]

    application.token_store = token_store
    return application

# --------------------------------------------------------------------------
## 핸들러 함수
# --------------------------------------------------------------------------

def sign_up_handler(environ, *args):
    data = get_request_data(environ)
    account = environ['services']['identity'].sign_up(data.get('email'), data.get('password'), data.get('display_name'))
    return '201 Created', json.dumps(account)

def sign_in_handler(environ, *args):
    data = get_request_data(environ)
    token = environ['services']['identity'].sign_in(data.get('email'), data.get('password'))
    return '201 Created', json.dumps(token)

def sign_out_handler(environ, *args):
    environ['services']['identity'].sign_out(get_token(environ))
    return '204 No Content', ''

def dashboard_handler(environ, *args):
    session = authorize(environ)
    return '200 OK', json.dumps(environ['services']['dashboard'].overview(session))

def list_items_handler(environ, collection):
    authorize_collection(environ, collection)
    items = environ['services']['content'].list_items(collection)
    return '200 OK', json.dumps({"items": items})

def create_item_handler(environ, collection):
    session = authorize_collection(environ, collection)
    data = get_request_data(environ)
    item = environ['services']['content'].save_item(collection, data, actor_id=session.user_id)
    return '201 Created', json.dumps(item)

def update_item_handler(environ, collection, item_id):
    session = authorize_collection(environ, collection)
    data = get_request_data(environ)
    item = environ['services']['content'].save_item(collection, data, item_id=item_id, actor_id=session.user_id)
    return '200 OK', json.dumps(item)

def delete_item_handler(environ, collection, item_id):
    authorize_collection(environ, collection)
    environ['services']['content'].delete_item(collection, item_id)
    return '204 No Content', ''

def mark_message_read_handler(environ, message_id):
    authorize(environ, Permission.MESSAGES)
    item = environ['services']['content'].mark_message_read(message_id)
    return '200 OK', json.dumps(item)

def list_magazine_handler(environ, *args):
    authorize(environ, Permission.MAGAZINE)
    magazine_service = environ['services']['magazine']
    issues = [
        dict(issue, read_stats=magazine_service.issue_read_stats(issue['id']))
        for issue in magazine_service.list_issues()
    ]
    return '200 OK', json.dumps({"issues": issues})

def create_magazine_handler(environ, *args):
    session = authorize(environ, Permission.MAGAZINE)
    data = get_request_data(environ)
    result = environ['services']['magazine'].save_issue(data, actor_id=session.user_id)
    return ('201 Created' if result['created'] else '200 OK'), json.dumps(result)

def update_magazine_handler(environ, issue_id):
    session = authorize(environ, Permission.MAGAZINE)
    data = get_request_data(environ)
    result = environ['services']['magazine'].save_issue(data, issue_id=issue_id, actor_id=session.user_id)
    return '200 OK', json.dumps(result)

def delete_magazine_handler(environ, issue_id):
    authorize(environ, Permission.MAGAZINE)
    report = environ['services']['magazine'].delete_issue(issue_id)
    return '200 OK', json.dumps(report.to_dict())

def magazine_stats_handler(environ, *args):
    authorize(environ, Permission.MAGAZINE)
    stats = environ['services']['magazine'].magazine_stats(datetime.now())
    return '200 OK', json.dumps(stats)

def list_roles_handler(environ, *args):
    authorize(environ, Permission.USERS)
    role_service = environ['services']['roles']
    return '200 OK', json.dumps({
        "users": role_service.list_users(),
        "assignments": role_service.list_assignments(),
    })

def create_profile_handler(environ, *args):
    authorize(environ, Permission.USERS)
    data = get_request_data(environ)
    profile = environ['services']['roles'].create_profile(data.get('id'), data.get('email'), data.get('name'))
    return '201 Created', json.dumps(profile)

def request_role_handler(environ, user_id, role_name):
    authorize(environ, Permission.USERS)
    assignment = environ['services']['roles'].request_role(user_id, role_name)
    return '200 OK', json.dumps(assignment)

def approve_role_handler(environ, user_id, role_name):
    authorize(environ, Permission.USERS)
    assignment = environ['services']['roles'].approve_role(user_id, role_name)
    return '200 OK', json.dumps(assignment)

def revoke_role_handler(environ, user_id, role_name):
    authorize(environ, Permission.USERS)
    environ['services']['roles'].revoke_role(user_id, role_name)
    return '204 No Content', ''

def public_surveys_handler(environ, *args):
    page = environ['services']['survey_page'].build_page(datetime.now())
    return '200 OK', json.dumps(page)

_ID = r'([a-zA-Z0-9_-]+)'

ROUTES = [
    ('POST', r'^/v1/auth/accounts$', sign_up_handler),
    ('POST', r'^/v1/auth/sessions$', sign_in_handler),
    ('DELETE', r'^/v1/auth/sessions$', sign_out_handler),
    ('GET', r'^/v1/admin/dashboard$', dashboard_handler),
    ('GET', r'^/v1/admin/magazine$', list_magazine_handler),
    ('POST', r'^/v1/admin/magazine$', create_magazine_handler),
    ('GET', r'^/v1/admin/magazine/stats$', magazine_stats_handler),
    ('PUT', rf'^/v1/admin/magazine/{_ID}$', update_magazine_handler),
    ('DELETE', rf'^/v1/admin/magazine/{_ID}$', delete_magazine_handler),
    ('POST', rf'^/v1/admin/collections/contact_messages/{_ID}/read$', mark_message_read_handler),
    ('GET', r'^/v1/admin/collections/([a-z_]+)$', list_items_handler),
    ('POST', r'^/v1/admin/collections/([a-z_]+)$', create_item_handler),
    ('PUT', rf'^/v1/admin/collections/([a-z_]+)/{_ID}$', update_item_handler),
    ('DELETE', rf'^/v1/admin/collections/([a-z_]+)/{_ID}$', delete_item_handler),
    ('GET', r'^/v1/admin/roles$', list_roles_handler),
    ('POST', r'^/v1/admin/users$', create_profile_handler),
    ('PUT', rf'^/v1/admin/roles/{_ID}/([a-z_]+)$', request_role_handler),
    ('DELETE', rf'^/v1/admin/roles/{_ID}/([a-z_]+)$', revoke_role_handler),
    ('POST', rf'^/v1/admin/roles/{_ID}/([a-z_]+)/approve$', approve_role_handler),
    ('GET', r'^/v1/public/surveys$', public_surveys_handler),
]

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

def main():
    config = load_config_from_env(".env")
    configure_logging(config)
    session_factory = create_session_factory(create_db_engine(config.database_url))
    application = create_application(config, session_factory)
    try:
        with make_server("", config.server_port, application) as httpd:
            LOGGER.info("Serving club admin backend on port %s...", config.server_port)
            httpd.serve_forever()
    except OSError as e:
        LOGGER.error("Error starting server: %s", e)
        sys.exit(1)

if __name__ == "__main__":
    main()
