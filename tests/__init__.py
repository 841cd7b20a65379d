# Roo Client Test Suite
#
# This package contains:
# - API tests against an in-process fake backend (pytest + httpx + Flask)
# - Unit tests for normalization, query building, filtering and status rules
# - Concurrency tests for the list controller
#
# Run with: pytest [-m smoke|products|drivers|inventory|filters|status|concurrent]
