"""
Movie Blog API - Home Route
============================

What:  GET / answers with a plain-text greeting (configurable via GREETING).
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from movie_blog.config import settings

router = APIRouter(tags=["Home"])


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Home page greeting",
)
@router.api_route("/", methods=["HEAD"], response_class=PlainTextResponse, include_in_schema=False)
async def home() -> str:
    return settings.greeting
