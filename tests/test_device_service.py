# =============================================================================
# tests/test_device_service.py - Approved Devices Tests
# =============================================================================

import pytest

from core.services import device_service
from core.services.device_service import DeviceService


@pytest.fixture(autouse=True)
def empty_cache():
    device_service.devices_cache.clear()
    yield
    device_service.devices_cache.clear()


class TestListDevices:

    def test_first_page_is_cached(self, fake_supabase):
        fake_supabase.on("approved_devices", data=[{"model": "G19"}], count=812)

        first = DeviceService.list_devices()
        second = DeviceService.list_devices()

        assert first == second == {"rows": [{"model": "G19"}], "total": 812}
        assert len(fake_supabase.queries_for("approved_devices")) == 1

    def test_query_shape(self, fake_supabase):
        DeviceService.list_devices(limit=20, offset=40)

        query = fake_supabase.queries_for("approved_devices")[0]
        assert query.args_of("select") == [("manufacturer, model, type, description",)]
        assert query.kwargs_of("select") == [{"count": "exact"}]
        assert query.args_of("order") == [("manufacturer",)]
        assert query.args_of("range") == [(40, 59)]

    def test_other_pages_not_cached(self, fake_supabase):
        DeviceService.list_devices(offset=50)
        DeviceService.list_devices(offset=50)
        assert len(fake_supabase.queries_for("approved_devices")) == 2

    def test_filters_bypass_cache(self, fake_supabase):
        DeviceService.list_devices(manufacturer="Glock", model="19")
        DeviceService.list_devices(manufacturer="Glock", model="19")

        queries = fake_supabase.queries_for("approved_devices")
        assert len(queries) == 2
        assert queries[0].args_of("eq") == [("manufacturer", "Glock")]
        assert queries[0].args_of("ilike") == [("model", "%19%")]
        assert device_service.devices_cache.get() is None

    def test_all_manufacturers_is_unfiltered(self, fake_supabase):
        DeviceService.list_devices(manufacturer="all-manufacturers")

        query = fake_supabase.queries_for("approved_devices")[0]
        assert query.args_of("eq") == []
        assert device_service.devices_cache.get() is not None
