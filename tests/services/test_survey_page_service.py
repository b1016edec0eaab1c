# tests/services/test_survey_page_service.py
import pytest
from datetime import datetime
from unittest.mock import MagicMock

from club_admin.services.content_service import ContentService
from club_admin.services.survey_page_service import SurveyPageService

NOW = datetime(2026, 10, 19, 12, 0)

@pytest.fixture
def mock_content_service() -> MagicMock:
    return MagicMock(spec=ContentService)

@pytest.fixture
def page_service(mock_content_service: MagicMock) -> SurveyPageService:
    return SurveyPageService(mock_content_service)

class TestSurveyPage:
    def test_surveys_are_split_by_active_flag(self, page_service: SurveyPageService, mock_content_service: MagicMock):
        # === Arrange ===
        mock_content_service.list_items.return_value = [
            {"id": "s-1", "title": "Memnuniyet Anketi", "active": True,
             "start_date": "2026-10-01", "end_date": "2026-10-25", "survey_link": "https://forms.example.org/1"},
            {"id": "s-2", "title": "Eski Anket", "active": False,
             "start_date": "2026-03-01", "end_date": "2026-03-15"},
        ]

        # === Act ===
        page = page_service.build_page(NOW)

        # === Assert ===
        mock_content_service.list_items.assert_called_once_with("surveys")
        assert page["stats"] == {"active": 1, "completed": 1, "total": 2}
        assert page["empty"] is False
        active = page["active"][0]
        assert active["start_date"] == "1 Ekim 2026"
        assert active["end_date"] == "25 Ekim 2026"
        # 10월 25일 자정까지 5.5일 → 6일
        assert active["days_remaining"] == 6
        assert "days_remaining" not in page["completed"][0]
        assert page["completed"][0]["end_date"] == "15 Mart 2026"

    def test_active_survey_past_deadline_shows_zero_days(self, page_service: SurveyPageService, mock_content_service: MagicMock):
        mock_content_service.list_items.return_value = [
            {"id": "s-3", "title": "Gecikmiş", "active": True, "end_date": "2026-10-01"},
        ]

        page = page_service.build_page(NOW)

        assert page["active"][0]["days_remaining"] == 0

    def test_empty_page(self, page_service: SurveyPageService, mock_content_service: MagicMock):
        mock_content_service.list_items.return_value = []

        page = page_service.build_page(NOW)

        assert page["empty"] is True
        assert page["stats"]["total"] == 0
