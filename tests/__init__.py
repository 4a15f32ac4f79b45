# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the RangeOps API:
# - test_models.py: Pydantic request model validation
# - test_utils.py / test_cache.py: lib helpers
# - test_*_service.py: Service logic against a fake Supabase client
# - test_api.py: Endpoint behaviour through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
