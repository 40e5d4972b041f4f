from datetime import datetime
from types import SimpleNamespace

from civicpulse.models import ReportStatus, ReportType, UserRole, VoteDirection
from civicpulse.services.civic_report import annotate_report


def make_report(**overrides):
    fields = dict(
        id=7,
        title="Overflowing bin",
        description="",
        type=ReportType.OVERFLOW_DUSTBIN,
        image_url=None,
        latitude=28.61,
        longitude=77.21,
        support_count=2,
        opposition_count=1,
        status=ReportStatus.PENDING,
        created_at=datetime(2026, 10, 1, 12, 0, 0),
        created_by_id=1,
        created_by=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_own_report_cannot_be_voted():
    annotated = annotate_report(make_report(), None, viewer_id=1)

    assert annotated.is_own_report is True
    assert annotated.has_voted is False
    assert annotated.user_vote is None
    assert annotated.can_vote is False


def test_other_report_without_vote_can_be_voted():
    annotated = annotate_report(make_report(), None, viewer_id=2)

    assert annotated.is_own_report is False
    assert annotated.has_voted is False
    assert annotated.can_vote is True


def test_existing_vote_is_reported_and_blocks_voting():
    annotated = annotate_report(make_report(), VoteDirection.OPPOSE, viewer_id=2)

    assert annotated.has_voted is True
    assert annotated.user_vote == VoteDirection.OPPOSE
    assert annotated.can_vote is False


def test_counts_and_fields_are_copied_unchanged():
    annotated = annotate_report(make_report(), None, viewer_id=2)

    assert annotated.support_count == 2
    assert annotated.opposition_count == 1
    assert annotated.status == ReportStatus.PENDING
    assert annotated.created_by is None


def test_author_name_falls_back_to_email():
    author = SimpleNamespace(id=1, full_name=None, email="alice@example.com", role=UserRole.CITIZEN)
    annotated = annotate_report(make_report(created_by=author), None, viewer_id=2)

    assert annotated.created_by.name == "alice@example.com"
    assert annotated.created_by.role == UserRole.CITIZEN


def test_serialized_shape_uses_camel_case():
    data = annotate_report(make_report(), VoteDirection.SUPPORT, viewer_id=2).model_dump(
        mode="json", by_alias=True
    )

    assert set(data) == {
        "id", "title", "description", "type", "imageUrl", "latitude", "longitude",
        "supportCount", "oppositionCount", "status", "createdAt", "createdById",
        "createdBy", "isOwnReport", "userVote", "hasVoted", "canVote",
    }
    assert data["userVote"] == "support"
    assert data["type"] == "overflow_dustbin"
    assert data["imageUrl"] is None
