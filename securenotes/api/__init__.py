"""API routes."""
from fastapi import APIRouter

from securenotes.api import notes

api_router = APIRouter(prefix="/api")

api_router.include_router(notes.router, prefix="/notes", tags=["Notes"])
