"""Liveness route."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from tenkai.responses import envelope

router = APIRouter(tags=["root"])


@router.get("/")
async def root() -> JSONResponse:
    return envelope(message="tenkai API server is running")
