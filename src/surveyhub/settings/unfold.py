"""Django Unfold admin configuration."""

from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _

from .base import VERSION

UNFOLD = {
    "SITE_TITLE": f"SurveyHub v{VERSION} Admin",
    "SITE_HEADER": f"SurveyHub v{VERSION} Administration",
    "SITE_URL": "/",
    "SHOW_HISTORY": True,
    "SHOW_VIEW_ON_SITE": False,
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "title": _("Dashboard"),
                "separator": False,
                "items": [
                    {
                        "title": _("Dashboard"),
                        "icon": "home",
                        "link": reverse_lazy("admin:index"),
                    },
                ],
            },
            {
                "title": _("Users"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Users"),
                        "icon": "person",
                        "link": reverse_lazy("admin:accounts_surveyuser_changelist"),
                    },
                ],
            },
            {
                "title": _("Questionnaires"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Questionnaires"),
                        "icon": "quiz",
                        "link": reverse_lazy("admin:questionnaires_questionnaire_changelist"),
                    },
                    {
                        "title": _("Submissions"),
                        "icon": "assignment_turned_in",
                        "link": reverse_lazy("admin:questionnaires_submission_changelist"),
                    },
                    {
                        "title": _("Answers"),
                        "icon": "question_answer",
                        "link": reverse_lazy("admin:questionnaires_answer_changelist"),
                    },
                ],
            },
        ],
    },
}
