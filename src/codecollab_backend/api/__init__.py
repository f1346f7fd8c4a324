"""API layer: application factory, routers, request models and services."""

from codecollab_backend.api.app import create_api

__all__ = ["create_api"]
