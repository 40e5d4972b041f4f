"""
GeoJSON layers for the tile map.

The map client draws what it receives: every feature carries a ``marker``
property naming its style and a colour, so report status, facilities,
workers and the viewer's own position are told apart without client logic.
"""
from typing import Any, Dict, Iterable, List, Optional

from civicpulse.core.config import settings
from civicpulse.models import ReportStatus
from civicpulse.schemas import CivicReport, MapCenter, MapLayer, Position
from civicpulse.schemas import PublicFacility, WorkerLocation

WARNING_MARKER = {"kind": "warning", "color": "#dc2626", "icon": "exclamation"}
SUCCESS_MARKER = {"kind": "success", "color": "#16a34a", "icon": "check"}
USER_MARKER = {"kind": "user", "color": "#3b82f6", "icon": "user"}
FACILITY_MARKER = {"kind": "facility", "color": "#7c3aed", "icon": "building"}
WORKER_MARKER = {"kind": "worker", "color": "#f59e0b", "icon": "truck"}

STATUS_MARKERS = {
    ReportStatus.PENDING: WARNING_MARKER,
    ReportStatus.ESCALATED: WARNING_MARKER,
    ReportStatus.RESOLVED: SUCCESS_MARKER,
}

# Whole-country view when the viewer position is unknown
DEFAULT_CENTER = (20.5937, 78.9629)
DEFAULT_ZOOM = 5
USER_ZOOM = 13


def marker_for_status(status: Any) -> Dict[str, str]:
    try:
        return dict(STATUS_MARKERS[ReportStatus(status)])
    except ValueError:
        return dict(WARNING_MARKER)


def map_center(user_position: Optional[Position]) -> MapCenter:
    if user_position is None:
        return MapCenter(lat=DEFAULT_CENTER[0], lng=DEFAULT_CENTER[1], zoom=DEFAULT_ZOOM)
    return MapCenter(lat=user_position.lat, lng=user_position.lng, zoom=USER_ZOOM)


def _point(lat: float, lng: float, feature_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
    # GeoJSON orders coordinates longitude first
    return {
        "type": "Feature",
        "id": feature_id,
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "properties": properties,
    }


def report_feature(report: CivicReport) -> Dict[str, Any]:
    properties = report.model_dump(mode="json", by_alias=True)
    properties["marker"] = marker_for_status(report.status)
    # Paths from the host root
    prefix = settings.API_PREFIX.rstrip("/")
    properties["voteUrls"] = {
        "support": f"{prefix}/civic-report/{report.id}/support",
        "oppose": f"{prefix}/civic-report/{report.id}/oppose",
    }
    return _point(report.latitude, report.longitude, f"report-{report.id}", properties)


def facility_feature(facility: PublicFacility) -> Dict[str, Any]:
    properties = facility.model_dump(mode="json", by_alias=True)
    properties["marker"] = dict(FACILITY_MARKER)
    return _point(facility.latitude, facility.longitude, f"facility-{facility.id}", properties)


def worker_feature(location: WorkerLocation) -> Dict[str, Any]:
    properties = location.model_dump(mode="json", by_alias=True)
    properties["marker"] = dict(WORKER_MARKER)
    return _point(location.latitude, location.longitude, f"worker-{location.worker_id}", properties)


def user_feature(position: Position) -> Dict[str, Any]:
    properties = {"label": "Your Location", "marker": dict(USER_MARKER)}
    return _point(position.lat, position.lng, "user", properties)


def build_map_layer(
    reports: Iterable[CivicReport] = (),
    facilities: Iterable[PublicFacility] = (),
    workers: Iterable[WorkerLocation] = (),
    user_position: Optional[Position] = None,
) -> MapLayer:
    features: List[Dict[str, Any]] = []
    if user_position is not None:
        features.append(user_feature(user_position))
    features.extend(report_feature(report) for report in reports)
    features.extend(facility_feature(facility) for facility in facilities)
    features.extend(worker_feature(worker) for worker in workers)

    return MapLayer(
        center=map_center(user_position),
        features=features,
        user_position=user_position,
    )
