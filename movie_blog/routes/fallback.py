"""
Movie Blog API - Catch-All Route
=================================

What:  Answers every request no other route handles with 400 and a plain-text
       "Endpoint not implemented" body.
How:   A path-converter route accepting every method. Starlette prefers a full
       match over a path-only match, so a known path requested with an
       unsupported method (e.g. PATCH /posts/1) also lands here instead of
       producing 405.
When:  This router must be included after every other router.
"""

from fastapi import APIRouter, Request

from movie_blog.exceptions import RouteNotImplementedError

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{unmatched_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def not_implemented(request: Request, unmatched_path: str) -> None:
    raise RouteNotImplementedError(method=request.method, path=request.url.path)
