"""Journal route registration."""

from __future__ import annotations

from fastapi import APIRouter

from journal_tracker.api.models import (
    JournalItem,
    JournalPage,
    RefreshResponse,
    SummaryModel,
)
from journal_tracker.api.queries.journals import (
    export_journals,
    get_journal,
    journal_summary,
    list_all_journals,
    list_journals,
    refresh_journals,
)
from journal_tracker.shared.constants import API_PREFIX

router = APIRouter(prefix=API_PREFIX)

router.add_api_route(
    "/journals",
    list_journals,
    methods=["GET"],
    response_model=JournalPage,
)
router.add_api_route(
    "/journals/all",
    list_all_journals,
    methods=["GET"],
    response_model=list[JournalItem],
)
router.add_api_route(
    "/journals/summary",
    journal_summary,
    methods=["GET"],
    response_model=SummaryModel,
)
router.add_api_route(
    "/journals/export.csv",
    export_journals,
    methods=["GET"],
)
router.add_api_route(
    "/journals/{issn}",
    get_journal,
    methods=["GET"],
    response_model=JournalItem,
)
router.add_api_route(
    "/refresh",
    refresh_journals,
    methods=["POST"],
    response_model=RefreshResponse,
)
