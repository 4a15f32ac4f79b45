# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for request validation
# - services/: One service class per feature area, talking to Supabase
#
# Code in this package should NOT import from FastAPI routers or Celery
# task modules at import time. This keeps the logic testable and reusable.
# =============================================================================
