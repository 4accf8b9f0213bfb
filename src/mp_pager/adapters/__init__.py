"""Adapters – optional integrations (Redis, FastAPI)."""
