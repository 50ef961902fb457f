"""
Movie Blog API - Post Route Handlers
=====================================

What:  The five post resource endpoints.
How:   Each handler reads its inputs, validates the body where there is one,
       makes exactly one repository call and returns the result. Failures are
       raised as application exceptions and turned into responses by the
       handlers registered in main.py.

Endpoints:
    GET    /posts             → 200 list of posts (also /posts/)
    GET    /posts/{postId}    → 200 list of zero or one post
    POST   /posts             → 200 {"insertId", "affectedRows"}
    PUT    /posts/{postId}    → 200 {"affectedRows"}
    DELETE /posts/{postId}    → 200 {"affectedRows"}

The path identifier is forwarded as an opaque string. Missing rows are not
turned into 404s: reads return an empty list and writes report 0 affected rows.
Every GET route also answers HEAD.
"""

import json
import logging
from typing import Any, List

from fastapi import APIRouter, Depends, Path, Request

from movie_blog.schemas.post import (
    CreateResult,
    ErrorResponse,
    MutationResult,
    PostPayload,
    PostResponse,
    ValidationErrorResponse,
)
from movie_blog.services.post_repository import PostRepository, get_post_repository
from movie_blog.validation import validate_post_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])

# Request body is read and validated by hand (400, not FastAPI's 422), so the
# schema is attached to the OpenAPI document explicitly.
_POST_BODY_DOC = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": PostPayload.model_json_schema()}},
    }
}

_STORE_ERROR = {500: {"description": "Database error", "model": ErrorResponse}}
_WRITE_ERRORS = {
    400: {"description": "Invalid request body", "model": ValidationErrorResponse},
    **_STORE_ERROR,
}


async def read_json_body(request: Request) -> Any:
    """
    Decode the request body as JSON.

    An empty body decodes to an empty object so each missing field is
    reported on its own. Undecodable bodies return None, which validation
    reports as a `body` violation.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        logger.debug("Request body is not valid JSON (%d bytes)", len(raw))
        return None


@router.get(
    "/posts",
    response_model=List[PostResponse],
    responses=_STORE_ERROR,
    summary="List all posts",
)
@router.get("/posts/", response_model=List[PostResponse], include_in_schema=False)
@router.api_route("/posts", methods=["HEAD"], include_in_schema=False)
async def list_posts(
    repository: PostRepository = Depends(get_post_repository),
) -> List[PostResponse]:
    return await repository.list_all()


@router.get(
    "/posts/{postId}",
    response_model=List[PostResponse],
    responses=_STORE_ERROR,
    summary="Get a post by ID",
    description="Returns an array holding the matching post, or an empty array.",
)
@router.api_route("/posts/{postId}", methods=["HEAD"], include_in_schema=False)
async def get_post(
    post_id: str = Path(alias="postId", description="Identifier of the post"),
    repository: PostRepository = Depends(get_post_repository),
) -> List[PostResponse]:
    return await repository.get_by_id(post_id)


@router.post(
    "/posts",
    response_model=CreateResult,
    responses=_WRITE_ERRORS,
    summary="Create a post",
    openapi_extra=_POST_BODY_DOC,
)
@router.post("/posts/", response_model=CreateResult, include_in_schema=False)
async def create_post(
    request: Request,
    repository: PostRepository = Depends(get_post_repository),
) -> CreateResult:
    """
    Create a post from `title`, `imgSrc`, `pelicula` and `content`.

    All four fields are required non-empty strings and `imgSrc` must be an
    absolute URL. Any failure answers 400 before the database is touched.
    """
    payload = validate_post_payload(await read_json_body(request))
    return await repository.create_from_payload(payload)


@router.put(
    "/posts/{postId}",
    response_model=MutationResult,
    responses=_WRITE_ERRORS,
    summary="Replace a post",
    openapi_extra=_POST_BODY_DOC,
)
async def update_post(
    request: Request,
    post_id: str = Path(alias="postId", description="Identifier of the post"),
    repository: PostRepository = Depends(get_post_repository),
) -> MutationResult:
    """
    Overwrite all four fields of a post. Partial updates are rejected by
    the same validation as create.
    """
    payload = validate_post_payload(await read_json_body(request))
    return await repository.update_from_payload(post_id, payload)


@router.delete(
    "/posts/{postId}",
    response_model=MutationResult,
    responses=_STORE_ERROR,
    summary="Delete a post",
)
async def delete_post(
    post_id: str = Path(alias="postId", description="Identifier of the post"),
    repository: PostRepository = Depends(get_post_repository),
) -> MutationResult:
    return await repository.delete(post_id)
