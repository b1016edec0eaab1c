# tests/test_app.py
import io
import json

import pytest

from club_admin.app import create_application, handle_exception
from club_admin.auth import Role
from club_admin.config import AppConfig
from club_admin.database import Base, create_db_engine, create_session_factory, models
from club_admin.services.exceptions import LoginRequiredError, PermissionDeniedError
from club_admin.services.identity_service import hash_password

# ===================================================================
#  Fixture 설정
# ===================================================================

def make_config(fallback_role=Role.BASKAN) -> AppConfig:
    return AppConfig(
        database_url="sqlite://",
        logging_level="INFO",
        login_path="/admin",
        fallback_role=fallback_role,
        token_expire_minutes=60,
        server_port=8000,
        github_owner=None,
        github_repo=None,
        github_branch="main",
        github_token=None,
        github_api_url="https://api.github.com",
        storage_timeout=10,
    )

@pytest.fixture
def session_factory():
    """테스트마다 새 인메모리 SQLite DB를 만들고 운영진 계정을 넣습니다."""
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    factory = create_session_factory(engine)

    db = factory()
    for account_id, email, roles in (
        ("admin-1", "baskan@example.org", [Role.BASKAN]),
        ("editor-1", "dergi@example.org", [Role.DERGI_KOORDINATOR]),
    ):
        db.add(models.AuthAccount(id=account_id, email=email, password_hash=hash_password("pw")))
        db.add(models.User(id=account_id, email=email, name=email.split("@")[0]))
        for role in roles:
            db.add(models.UserRole(user_id=account_id, role=role.value, is_approved=True))
    db.add(models.ContactMessage(id="msg-1", name="Ali", email="ali@example.org", message="Merhaba"))
    db.commit()
    db.close()

    yield factory
    engine.dispose()

@pytest.fixture
def app(session_factory):
    return create_application(make_config(), session_factory)

def call(app, method, path, body=None, token=None):
    """WSGI 애플리케이션을 직접 호출하고 (status, headers, json)을 반환합니다."""
    raw = json.dumps(body).encode("utf-8") if body is not None else b""
    environ = {
        "REQUEST_METHOD": method,
        "PATH_INFO": path,
        "CONTENT_LENGTH": str(len(raw)),
        "wsgi.input": io.BytesIO(raw),
    }
    if token:
        environ["HTTP_X_AUTH_TOKEN"] = token

    captured = {}
    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    payload = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], (json.loads(payload) if payload else None)

def sign_in(app, email, password="pw"):
    status, _, body = call(app, "POST", "/v1/auth/sessions", {"email": email, "password": password})
    assert status == "201 Created"
    return body["token"]

# ===================================================================
#  인증 및 리다이렉트 테스트
# ===================================================================
class TestAuthentication:
    def test_admin_route_without_token_redirects(self, app):
        status, headers, body = call(app, "GET", "/v1/admin/dashboard")

        assert status == "302 Found"
        assert headers["Location"] == "/admin"
        assert body == {"redirect": "/admin"}

    def test_invalid_token_redirects(self, app):
        status, headers, _ = call(app, "GET", "/v1/admin/collections/news", token="bogus")

        assert status == "302 Found"
        assert headers["Location"] == "/admin"

    def test_wrong_password(self, app):
        status, _, _ = call(app, "POST", "/v1/auth/sessions", {"email": "baskan@example.org", "password": "x"})

        assert status == "401 Unauthorized"

    def test_sign_out_invalidates_token(self, app):
        token = sign_in(app, "baskan@example.org")

        status, _, _ = call(app, "DELETE", "/v1/auth/sessions", token=token)
        assert status == "204 No Content"

        status, _, _ = call(app, "GET", "/v1/admin/dashboard", token=token)
        assert status == "302 Found"

    @pytest.mark.parametrize("method, path", [
        ("GET", "/v1/admin/collections/payroll"),
        ("POST", "/v1/admin/collections/payroll"),
        ("PUT", "/v1/admin/collections/payroll/x-1"),
        ("DELETE", "/v1/admin/collections/payroll/x-1"),
    ])
    def test_unknown_collection_without_token_redirects(self, app, method, path):
        """비로그인 요청에는 컬렉션 이름의 존재 여부를 드러내지 않고 로그인으로 보냅니다."""
        status, headers, _ = call(app, method, path, {"title": "x"})

        assert status == "302 Found"
        assert headers["Location"] == "/admin"

    def test_unknown_route(self, app):
        status, _, body = call(app, "GET", "/v1/nothing")

        assert status == "404 Not Found"
        assert body == {"error": "Not Found"}

# ===================================================================
#  권한 게이팅 테스트
# ===================================================================
class TestAuthorization:
    def test_dashboard_for_president(self, app):
        token = sign_in(app, "baskan@example.org")

        status, _, body = call(app, "GET", "/v1/admin/dashboard", token=token)

        assert status == "200 OK"
        assert len(body["tabs"]) == 12
        assert body["user"]["role_label"] == "Başkan"
        assert body["user"]["is_fallback"] is False

    def test_coordinator_is_limited_to_own_collections(self, app):
        token = sign_in(app, "dergi@example.org")

        status, _, body = call(app, "GET", "/v1/admin/dashboard", token=token)
        assert [tab["key"] for tab in body["tabs"]] == ["overview", "magazine", "sponsors"]

        # 화면에 보이지 않는 탭의 데이터는 서버에서도 거부되어야 함
        status, _, _ = call(app, "GET", "/v1/admin/collections/news", token=token)
        assert status == "403 Forbidden"
        status, _, _ = call(app, "POST", "/v1/admin/collections/news", {"title": "x"}, token=token)
        assert status == "403 Forbidden"
        status, _, _ = call(app, "GET", "/v1/admin/roles", token=token)
        assert status == "403 Forbidden"

        status, _, _ = call(app, "GET", "/v1/admin/collections/sponsors", token=token)
        assert status == "200 OK"

    def test_account_without_profile_gets_fallback_role(self, app):
        status, _, _ = call(app, "POST", "/v1/auth/accounts", {"email": "yeni@example.org", "password": "pw"})
        assert status == "201 Created"
        token = sign_in(app, "yeni@example.org")

        status, _, body = call(app, "GET", "/v1/admin/dashboard", token=token)

        assert status == "200 OK"
        assert body["user"]["is_fallback"] is True
        assert len(body["tabs"]) == 12

    def test_disabled_fallback_grants_nothing(self, session_factory):
        app = create_application(make_config(fallback_role=None), session_factory)
        call(app, "POST", "/v1/auth/accounts", {"email": "yeni@example.org", "password": "pw"})
        token = sign_in(app, "yeni@example.org")

        status, _, body = call(app, "GET", "/v1/admin/dashboard", token=token)
        assert [tab["key"] for tab in body["tabs"]] == ["overview"]

        status, _, _ = call(app, "GET", "/v1/admin/collections/news", token=token)
        assert status == "403 Forbidden"

# ===================================================================
#  콘텐츠 CRUD 테스트
# ===================================================================
class TestContentCrud:
    def test_news_lifecycle(self, app):
        token = sign_in(app, "baskan@example.org")

        # === 생성 ===
        status, _, created = call(app, "POST", "/v1/admin/collections/news",
                                  {"title": "Bahar Şenliği", "published": True}, token=token)
        assert status == "201 Created"
        assert created["author_id"] == "admin-1"

        # === 목록 ===
        status, _, body = call(app, "GET", "/v1/admin/collections/news", token=token)
        assert [item["title"] for item in body["items"]] == ["Bahar Şenliği"]

        # === 수정 후 캐시가 갱신되어야 함 ===
        status, _, updated = call(app, "PUT", f"/v1/admin/collections/news/{created['id']}",
                                  {"title": "Bahar Şenliği 2026"}, token=token)
        assert status == "200 OK"
        _, _, body = call(app, "GET", "/v1/admin/collections/news", token=token)
        assert body["items"][0]["title"] == "Bahar Şenliği 2026"

        # === 삭제 ===
        status, _, _ = call(app, "DELETE", f"/v1/admin/collections/news/{created['id']}", token=token)
        assert status == "204 No Content"
        _, _, body = call(app, "GET", "/v1/admin/collections/news", token=token)
        assert body["items"] == []

    def test_validation_errors(self, app):
        token = sign_in(app, "baskan@example.org")

        status, _, _ = call(app, "POST", "/v1/admin/collections/news", {"bogus": 1}, token=token)
        assert status == "400 Bad Request"

        status, _, _ = call(app, "POST", "/v1/admin/collections/news", ["not", "an", "object"], token=token)
        assert status == "400 Bad Request"

        # 필수 컬럼(title) 누락
        status, _, _ = call(app, "POST", "/v1/admin/collections/news", {"summary": "x"}, token=token)
        assert status == "400 Bad Request"

    def test_missing_item_and_unknown_collection(self, app):
        token = sign_in(app, "baskan@example.org")

        status, _, _ = call(app, "DELETE", "/v1/admin/collections/news/nope", token=token)
        assert status == "404 Not Found"

        status, _, _ = call(app, "GET", "/v1/admin/collections/products", token=token)
        assert status == "404 Not Found"

    def test_messages_from_other_writers_are_visible(self, app, session_factory):
        """공개 문의 폼처럼 다른 경로로 들어온 메시지가 다음 요청에 바로 보여야 합니다."""
        # === Arrange ===
        token = sign_in(app, "baskan@example.org")
        _, _, body = call(app, "GET", "/v1/admin/collections/contact_messages", token=token)
        assert [item["id"] for item in body["items"]] == ["msg-1"]

        # === Act ===
        db = session_factory()
        db.add(models.ContactMessage(id="msg-2", name="Ayşe", email="ayse@example.org", message="Selam"))
        db.commit()
        db.close()
        _, _, body = call(app, "GET", "/v1/admin/collections/contact_messages", token=token)

        # === Assert ===
        assert sorted(item["id"] for item in body["items"]) == ["msg-1", "msg-2"]
        _, _, dashboard = call(app, "GET", "/v1/admin/dashboard", token=token)
        cards = {card["title"]: card["detail"] for card in dashboard["cards"]}
        assert cards["Mesajlar"] == "2 okunmamış"

    def test_mark_message_read(self, app):
        token = sign_in(app, "baskan@example.org")

        status, _, body = call(app, "POST", "/v1/admin/collections/contact_messages/msg-1/read", token=token)

        assert status == "200 OK"
        assert body["status"] == "read"

# ===================================================================
#  잡지 아카이브 테스트
# ===================================================================
class TestMagazine:
    def test_upsert_by_issue_number_and_delete(self, app):
        token = sign_in(app, "dergi@example.org")
        issue = {"title": "Sayı 1", "issue_number": 1, "publication_date": "2026-10-01"}

        status, _, first = call(app, "POST", "/v1/admin/magazine", issue, token=token)
        assert status == "201 Created"
        assert first["created"] is True

        status, _, second = call(app, "POST", "/v1/admin/magazine", dict(issue, title="Sayı 1 (yeni)"), token=token)
        assert status == "200 OK"
        assert second["created"] is False
        assert second["issue"]["id"] == first["issue"]["id"]

        _, _, listing = call(app, "GET", "/v1/admin/magazine", token=token)
        assert len(listing["issues"]) == 1
        assert listing["issues"][0]["title"] == "Sayı 1 (yeni)"
        assert listing["issues"][0]["read_stats"] == {"reads": 0, "avg_duration": 0}

        # 스토리지가 설정되지 않았으면 DB에서만 삭제됩니다.
        status, _, report = call(app, "DELETE", f"/v1/admin/magazine/{first['issue']['id']}", token=token)
        assert status == "200 OK"
        assert report["deleted"] is True
        assert report["storage_skipped"] is True

        _, _, listing = call(app, "GET", "/v1/admin/magazine", token=token)
        assert listing["issues"] == []

    def test_magazine_stats(self, app):
        token = sign_in(app, "dergi@example.org")

        status, _, stats = call(app, "GET", "/v1/admin/magazine/stats", token=token)

        assert status == "200 OK"
        assert stats["total"] == 0

    def test_stats_include_reads_from_other_writers(self, app, session_factory):
        token = sign_in(app, "dergi@example.org")
        _, _, stats = call(app, "GET", "/v1/admin/magazine/stats", token=token)
        assert stats["total"] == 0

        db = session_factory()
        db.add(models.MagazineRead(reading_duration=120, device_type="mobile"))
        db.commit()
        db.close()

        _, _, stats = call(app, "GET", "/v1/admin/magazine/stats", token=token)
        assert stats["total"] == 1
        assert stats["device_stats"]["mobile"] == 100

# ===================================================================
#  역할 관리 테스트
# ===================================================================
class TestRoles:
    def test_request_and_approve_role(self, app):
        token = sign_in(app, "baskan@example.org")

        status, _, body = call(app, "PUT", "/v1/admin/roles/editor-1/iletisim_ekip", token=token)
        assert status == "200 OK"
        assert body["is_approved"] is False

        _, _, dashboard = call(app, "GET", "/v1/admin/dashboard", token=token)
        stats = {stat["title"]: stat["value"] for stat in dashboard["stats"]}
        assert stats["Bekleyen Roller"] == 1

        status, _, body = call(app, "POST", "/v1/admin/roles/editor-1/iletisim_ekip/approve", token=token)
        assert body["is_approved"] is True

        # 승인된 역할의 권한이 다음 요청부터 반영됩니다.
        editor = sign_in(app, "dergi@example.org")
        status, _, _ = call(app, "GET", "/v1/admin/collections/news", token=editor)
        assert status == "200 OK"

    def test_unknown_role(self, app):
        token = sign_in(app, "baskan@example.org")

        status, _, _ = call(app, "PUT", "/v1/admin/roles/editor-1/kral", token=token)

        assert status == "404 Not Found"

    def test_create_profile_ends_fallback(self, app):
        admin = sign_in(app, "baskan@example.org")
        _, _, account = call(app, "POST", "/v1/auth/accounts", {"email": "yeni@example.org", "password": "pw"})

        status, _, _ = call(app, "POST", "/v1/admin/users",
                            {"id": account["id"], "email": "yeni@example.org", "name": "Yeni"}, token=admin)
        assert status == "201 Created"

        token = sign_in(app, "yeni@example.org")
        _, _, body = call(app, "GET", "/v1/admin/dashboard", token=token)
        assert body["user"]["is_fallback"] is False
        assert body["permissions"] == []

# ===================================================================
#  공개 설문 페이지 및 오류 매핑 테스트
# ===================================================================
class TestPublicSurveys:
    def test_public_surveys_need_no_token(self, app):
        admin = sign_in(app, "baskan@example.org")
        call(app, "POST", "/v1/admin/collections/surveys",
             {"title": "Memnuniyet", "active": True, "end_date": "2099-01-01"}, token=admin)

        status, _, page = call(app, "GET", "/v1/public/surveys")

        assert status == "200 OK"
        assert page["stats"] == {"active": 1, "completed": 0, "total": 1}
        assert page["active"][0]["end_date"] == "1 Ocak 2099"

class TestHandleException:
    def test_login_required_is_redirect(self):
        status, _, headers = handle_exception(LoginRequiredError("x"), "/login")

        assert status == "302 Found"
        assert headers == [("Location", "/login")]

    def test_mapped_and_unmapped_errors(self):
        assert handle_exception(PermissionDeniedError("no"), "/admin")[0] == "403 Forbidden"
        assert handle_exception(RuntimeError("boom"), "/admin")[0] == "500 Internal Server Error"
