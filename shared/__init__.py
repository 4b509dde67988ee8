"""
Shared utilities for the story cache service.

This package aggregates common building blocks:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI app scaffolding, health and metrics routes
- test_helpers: Upstream payload factories and a fake upstream transport

Do not import from service_stories into shared/.
"""
