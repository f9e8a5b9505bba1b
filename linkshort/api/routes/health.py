"""Readiness check route."""

from fastapi import APIRouter, Response

router = APIRouter(tags=["Health"])


@router.get("/readyz", summary="Readiness check")
async def readyz() -> Response:
    return Response(status_code=200)
