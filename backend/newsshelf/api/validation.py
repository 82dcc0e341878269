"""
Shared validation for API endpoints.

Missing or malformed fields are rejected here, before any storage access,
and reported as 400 by the RequestValidationError handler.
"""

from fastapi import Query

MAX_USER_ID_LENGTH = 64
MAX_QUERY_LENGTH = 500

# Query parameter dependencies for common validations
UserIdParam = Query(
    ..., min_length=1, max_length=MAX_USER_ID_LENGTH, description="User identity"
)
SearchQueryParam = Query(
    ..., min_length=1, max_length=MAX_QUERY_LENGTH, description="Search query"
)
PageParam = Query(1, ge=1, le=1000, description="Result page")
PageSizeParam = Query(None, ge=1, le=100, description="Results per page")
