"""Shared FastAPI dependencies."""

from fastapi import Request

from pointbank.services.points import PointService


def get_point_service(request: Request) -> PointService:
    """Dependency: the process-wide PointService built at startup."""
    return request.app.state.point_service
