from datetime import datetime
from typing import Any, Dict

from club_admin.services.content_service import ContentService
from club_admin.utils.date_format import days_remaining, format_date


class SurveyPageService:
    """공개 설문 페이지(진행 중 / 완료된 설문)를 구성합니다."""

    def __init__(self, content_service: ContentService):
        self.content_service = content_service

    def build_page(self, now: datetime) -> Dict[str, Any]:
        """
        설문 목록을 active 플래그로 나누고, 표시용 날짜와 남은 일수를 붙입니다.

        Args:
            now: 남은 일수 계산 기준 시각.

        Returns:
            active, completed 목록과 stats(active/completed/total), empty 플래그.
        """
        surveys = self.content_service.list_items("surveys")
        active, completed = [], []
        for survey in surveys:
            entry = {
                "id": survey["id"],
                "title": survey.get("title"),
                "description": survey.get("description"),
                "survey_link": survey.get("survey_link"),
                "start_date": format_date(survey.get("start_date")),
                "end_date": format_date(survey.get("end_date")),
            }
            if survey.get("active"):
                entry["days_remaining"] = days_remaining(survey.get("end_date"), now)
                active.append(entry)
            else:
                completed.append(entry)

        return {
            "active": active,
            "completed": completed,
            "stats": {"active": len(active), "completed": len(completed), "total": len(surveys)},
            "empty": not surveys,
        }
