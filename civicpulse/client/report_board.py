"""
Client-side state of the civic reporting page, driven over the REST API.

The board keeps the caller's own reports and everybody else's, the active
tab and view mode, the acquired position and a transient status message.
Votes are applied optimistically and then reconciled by re-fetching the
other reports whatever the server answered. A second vote on a report
whose first vote is still in flight is ignored (disable-while-pending).
"""
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

import httpx

from civicpulse.core.config import settings
from civicpulse.core.logger import get_logger
from civicpulse.schemas import CivicReport, MapLayer, Position
from civicpulse.services.map_layers import build_map_layer

logger = get_logger("report_board")

VOTE_MESSAGE_TTL = 3.0
VOTE_ERROR_TTL = 4.0
SUBMIT_MESSAGE_TTL = 5.0
WITHDRAW_MESSAGE_TTL = 3.0

VOTE_VERBS = {"support": "supported", "oppose": "opposed"}


class Tab(str, Enum):
    MINE = "MINE"
    OTHERS = "OTHERS"


class ViewMode(str, Enum):
    LIST = "LIST"
    MAP = "MAP"


class LocationStatus(str, Enum):
    PENDING = "pending"
    ACQUIRED = "acquired"
    DENIED = "denied"


class StatusMessage:
    """A banner message that dismisses itself after ``ttl`` seconds."""

    def __init__(self, text: str, ok: bool, ttl: float, clock: Callable[[], float]) -> None:
        self.text = text
        self.ok = ok
        self.expires_at = clock() + ttl

    def __repr__(self) -> str:
        return f"StatusMessage({self.text!r}, ok={self.ok})"


def _error_detail(response: httpx.Response, fallback: str) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    return detail if isinstance(detail, str) and detail else fallback


class ReportBoard:
    def __init__(self, client: httpx.AsyncClient, clock: Callable[[], float] = time.monotonic) -> None:
        self.client = client
        self.clock = clock

        self.my_reports: List[Dict[str, Any]] = []
        self.other_reports: List[Dict[str, Any]] = []
        self.active_tab = Tab.MINE
        self.view_mode = ViewMode.LIST
        self.loading = False

        self.position: Optional[Position] = None
        self.location_status = LocationStatus.PENDING

        self.photo_preview: Optional[str] = None
        self.pending_votes: Set[str] = set()
        self._message: Optional[StatusMessage] = None

    # Messages

    @property
    def message(self) -> Optional[str]:
        if self._message is None:
            return None
        if self.clock() >= self._message.expires_at:
            self._message = None
            return None
        return self._message.text

    def _notify(self, text: str, ok: bool, ttl: float) -> None:
        self._message = StatusMessage(text, ok, ttl, self.clock)

    # Location

    def resolve_location(self, coords: Optional[Tuple[float, float]]) -> Position:
        """
        Record the outcome of the geolocation request. A refusal falls back to
        the configured default position so submission stays possible.
        """
        if coords is not None:
            self.position = Position(lat=coords[0], lng=coords[1])
            self.location_status = LocationStatus.ACQUIRED
        else:
            self.position = Position(lat=settings.DEFAULT_LATITUDE, lng=settings.DEFAULT_LONGITUDE)
            self.location_status = LocationStatus.DENIED
            logger.info("Location unavailable, using default position")
        return self.position

    @property
    def can_submit(self) -> bool:
        return self.position is not None

    # Navigation

    def select_tab(self, tab: Tab) -> None:
        self.active_tab = Tab(tab)

    def select_view(self, view_mode: ViewMode) -> None:
        self.view_mode = ViewMode(view_mode)

    def visible_reports(self) -> List[Dict[str, Any]]:
        return self.my_reports if self.active_tab == Tab.MINE else self.other_reports

    def map_layer(self) -> Optional[MapLayer]:
        """
        The map is only shown for other people's reports in map view.
        """
        if self.active_tab != Tab.OTHERS or self.view_mode != ViewMode.MAP:
            return None
        reports = [CivicReport.model_validate(r) for r in self.other_reports]
        return build_map_layer(reports, user_position=self.position)

    # Fetching

    async def _fetch(self, path: str, what: str) -> Optional[List[Dict[str, Any]]]:
        try:
            response = await self.client.get(path)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch {what}: error={e}")
        else:
            if response.is_success:
                return response.json()
            logger.warning(f"Failed to fetch {what}: status={response.status_code}")
        self._notify(f"Failed to fetch {what}", ok=False, ttl=SUBMIT_MESSAGE_TTL)
        return None

    async def refresh_mine(self) -> bool:
        reports = await self._fetch("/civic-report/my-reports", "your reports")
        if reports is None:
            return False
        self.my_reports = reports
        return True

    async def refresh_others(self) -> bool:
        reports = await self._fetch("/civic-report/other-reports", "other reports")
        if reports is None:
            return False
        self.other_reports = reports
        return True

    async def refresh(self) -> bool:
        self.loading = True
        try:
            mine = await self.refresh_mine()
            others = await self.refresh_others()
            return mine and others
        finally:
            self.loading = False

    # Actions

    def choose_photo(self, filename: Optional[str]) -> None:
        self.photo_preview = filename or None

    async def submit_report(
        self,
        title: str,
        type: str,
        description: str = "",
        photo: Optional[Tuple[str, bytes, str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Post a new report at the current position. ``photo`` is a
        (filename, content, content type) triple.
        """
        if not self.can_submit:
            self._notify(
                "Location not available. Please allow location access to submit a report.",
                ok=False,
                ttl=SUBMIT_MESSAGE_TTL,
            )
            return None

        data = {
            "title": title,
            "description": description,
            "type": type,
            "latitude": str(self.position.lat),
            "longitude": str(self.position.lng),
        }
        files = {"photo": photo} if photo else None
        try:
            response = await self.client.post("/civic-report", data=data, files=files)
        except httpx.HTTPError as e:
            logger.warning(f"Report submission failed: error={e}")
            self._notify("Failed to submit report", ok=False, ttl=SUBMIT_MESSAGE_TTL)
            return None

        if not response.is_success:
            self._notify(_error_detail(response, "Failed to submit report"), ok=False, ttl=SUBMIT_MESSAGE_TTL)
            return None

        created = response.json()
        self.photo_preview = None
        await self.refresh_mine()
        self._notify("Report submitted successfully!", ok=True, ttl=SUBMIT_MESSAGE_TTL)
        return created

    def _apply_optimistic_vote(self, report_id: str, direction: str) -> None:
        for report in self.other_reports:
            if str(report["id"]) == report_id:
                report["hasVoted"] = True
                report["userVote"] = direction
                report["canVote"] = False
                if direction == "support":
                    report["supportCount"] += 1
                else:
                    report["oppositionCount"] += 1

    def _restore_report(self, snapshot: Dict[str, Any]) -> None:
        for index, report in enumerate(self.other_reports):
            if report["id"] == snapshot["id"]:
                self.other_reports[index] = snapshot

    def is_vote_pending(self, report_id: Any) -> bool:
        return str(report_id) in self.pending_votes

    async def _post_vote(self, key: str, direction: str) -> Tuple[bool, str]:
        fallback = f"Failed to {direction} the report"
        try:
            response = await self.client.post(f"/civic-report/{key}/{direction}")
        except httpx.HTTPError as e:
            logger.warning(f"Vote request failed: report_id={key}, error={e}")
            return False, fallback
        if response.is_success:
            return True, f"Successfully {VOTE_VERBS[direction]} the report!"
        return False, _error_detail(response, fallback)

    async def vote(self, report_id: Any, direction: str) -> bool:
        """
        Cast a vote. Returns False without contacting the server when a vote on
        the same report is already in flight or the report cannot be voted on.

        Other reports are re-fetched afterwards whatever the outcome. If the
        vote failed and the re-fetch fails too, the optimistic change is undone
        locally.
        """
        if direction not in VOTE_VERBS:
            raise ValueError(f"Unknown vote direction: {direction}")

        key = str(report_id)
        if key in self.pending_votes:
            return False
        report = next((r for r in self.other_reports if str(r["id"]) == key), None)
        if report is not None and not report.get("canVote", False):
            return False

        snapshot = dict(report) if report is not None else None
        self.pending_votes.add(key)
        self._apply_optimistic_vote(key, direction)
        try:
            accepted, text = await self._post_vote(key, direction)
        finally:
            self.pending_votes.discard(key)

        refreshed = await self.refresh_others()
        if not accepted and not refreshed and snapshot is not None:
            self._restore_report(snapshot)

        ttl = VOTE_MESSAGE_TTL if accepted else VOTE_ERROR_TTL
        self._notify(text, ok=accepted, ttl=ttl)
        return accepted

    async def withdraw(self, report_id: Any) -> bool:
        try:
            response = await self.client.delete(f"/civic-report/{report_id}")
        except httpx.HTTPError as e:
            logger.warning(f"Withdraw request failed: report_id={report_id}, error={e}")
            self._notify("Failed to withdraw report", ok=False, ttl=SUBMIT_MESSAGE_TTL)
            return False

        if not response.is_success:
            self._notify(_error_detail(response, "Failed to withdraw report"), ok=False, ttl=SUBMIT_MESSAGE_TTL)
            return False

        await self.refresh_mine()
        self._notify("Report withdrawn successfully!", ok=True, ttl=WITHDRAW_MESSAGE_TTL)
        return True
