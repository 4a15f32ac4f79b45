# =============================================================================
# tests/test_certification_service.py - Certification Service Tests
# =============================================================================

from datetime import date, datetime, timezone

import pytest

from app.exceptions import CertificationNotFoundError
from core.models.certification import (
    CertificationCreate,
    CertificationQuery,
    CertificationStatus,
)
from core.services.certification_service import (
    CertificationService,
    classify_expiration,
)
from tests.conftest import NoRowsError

TODAY = date(2025, 6, 1)


class TestClassifyExpiration:
    """Status from an expiration date with a 30 day warning window."""

    @pytest.mark.parametrize("expiration, expected", [
        ("2025-05-31", CertificationStatus.EXPIRED),
        ("2025-06-01", CertificationStatus.EXPIRING_SOON),
        ("2025-07-01", CertificationStatus.EXPIRING_SOON),
        ("2025-07-02", CertificationStatus.ACTIVE),
        (date(2026, 1, 1), CertificationStatus.ACTIVE),
    ])
    def test_boundaries(self, expiration, expected):
        assert classify_expiration(expiration, TODAY, 30) == expected

    def test_no_date(self):
        assert classify_expiration(None, TODAY, 30) is None
        assert classify_expiration("", TODAY, 30) is None


class TestQuery:

    def test_defaults_restrict_to_active_employees(self, fake_supabase):
        fake_supabase.on("employees", data=[{"name": "Jane"}, {"name": "Sam"}, {"name": None}])
        fake_supabase.on("certifications", data=[{"id": 1}], count=41)

        result = CertificationService.query(CertificationQuery())

        assert result == {"data": [{"id": 1}], "count": 41}
        query = fake_supabase.queries_for("certifications")[0]
        assert query.kwargs_of("select") == [{"count": "exact"}]
        assert query.args_of("in_") == [("name", ["Jane", "Sam"])]
        assert query.calls[-1] == ("range", (0, 9), {})
        assert query.args_of("order") == [("expiration",)]
        assert query.kwargs_of("order") == [{"desc": True}]

    def test_filters_sorting_and_paging(self, fake_supabase):
        params = CertificationQuery.model_validate({
            "pageIndex": 2,
            "pageSize": 25,
            "filters": [
                {"id": "name", "value": "jan"},
                {"id": "number", "value": 1234},
                {"id": "action_status", "value": ["Renewal Sent", "Pending"]},
            ],
            "sorting": [{"id": "name", "desc": False}],
        })

        CertificationService.query(params)

        query = fake_supabase.queries_for("certifications")[0]
        assert query.args_of("ilike") == [("name", "%jan%")]
        assert query.args_of("eq") == [("number", 1234)]
        assert ("action_status", ["Renewal Sent", "Pending"]) in query.args_of("in_")
        assert query.args_of("order") == [("name",)]
        assert query.args_of("range") == [(50, 74)]

    def test_no_active_employees_skips_name_filter(self, fake_supabase):
        CertificationService.query(CertificationQuery())
        query = fake_supabase.queries_for("certifications")[0]
        assert query.args_of("in_") == []


class TestCreate:

    def test_status_computed_from_expiration(self, fake_supabase):
        fake_supabase.on("certifications", "insert", data=[{"id": 3}])

        CertificationService.create(CertificationCreate(
            name="Jane", certificate="CCW", number=55, expiration="2001-01-01"
        ))

        row = fake_supabase.queries_for("certifications", "insert")[0].args_of("insert")[0][0]
        assert row["status"] == "Expired"
        assert row["expiration"] == "2001-01-01"

    def test_explicit_status_kept(self, fake_supabase):
        CertificationService.create(CertificationCreate(
            name="Jane", certificate="CCW", expiration="2001-01-01", status="Active"
        ))

        row = fake_supabase.queries_for("certifications", "insert")[0].args_of("insert")[0][0]
        assert row["status"] == "Active"


class TestUpdateAndDelete:

    def test_partial_update(self, fake_supabase):
        fake_supabase.on("certifications", data={"id": 3, "name": "Jane"})
        fake_supabase.on("certifications", "update", data=[{"id": 3, "action_status": "Renewed"}])

        result = CertificationService.update(3, {"action_status": "Renewed"})

        assert result == {"id": 3, "action_status": "Renewed"}
        update = fake_supabase.queries_for("certifications", "update")[0]
        assert update.args_of("eq") == [("id", 3)]

    def test_empty_update_deletes(self, fake_supabase):
        fake_supabase.on("certifications", data={"id": 3})
        fake_supabase.on("certifications", "delete", data=[{"id": 3}])

        assert CertificationService.update(3, {}) is None
        assert len(fake_supabase.queries_for("certifications", "delete")) == 1
        assert fake_supabase.queries_for("certifications", "update") == []

    def test_update_missing(self, fake_supabase):
        fake_supabase.on("certifications", error=NoRowsError())

        with pytest.raises(CertificationNotFoundError):
            CertificationService.update(99, {"number": 1})

    def test_delete_missing(self, fake_supabase):
        with pytest.raises(CertificationNotFoundError):
            CertificationService.delete(99)


class TestExpiring:

    def test_cutoff_and_order(self, fake_supabase):
        now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

        CertificationService.expiring(days=10, now=now)

        query = fake_supabase.queries_for("certifications")[0]
        assert query.args_of("lt") == [("expiration", "2025-06-11T12:00:00+00:00")]
        assert query.kwargs_of("order") == [{"desc": False}]


class TestSweep:

    def test_only_changed_rows_written(self, fake_supabase):
        fake_supabase.on("certifications", data=[
            {"id": 1, "expiration": "2025-05-01", "status": "Active"},       # now expired
            {"id": 2, "expiration": "2025-06-10", "status": "Expiring Soon"},  # unchanged
            {"id": 3, "expiration": "2026-01-01", "status": None},            # now active
            {"id": 4, "expiration": None, "status": "Active"},                # no date
        ])

        result = CertificationService.sweep_statuses(today=TODAY)

        assert result == {"checked": 4, "updated": 2}
        updates = {
            q.args_of("eq")[0][1]: q.args_of("update")[0][0]["status"]
            for q in fake_supabase.queries_for("certifications", "update")
        }
        assert updates == {1: "Expired", 3: "Active"}
