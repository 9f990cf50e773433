"""Blog router for listing, reading and managing blog posts."""

import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError

from portfolio_api.auth import check_admin, get_settings, is_admin, require_admin, security
from portfolio_api.config import Settings
from portfolio_api.schemas import BlogPostCreate, BlogPostUpdate, BlogPostOut, validate_payload
from portfolio_api.storage import DatabaseStorage, DuplicateSlugError, get_storage
from portfolio_api.routers.errors import json_body, duplicate_slug_error, invalid_data_error, server_error

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["Blog"])

NOT_FOUND = "Blog post not found"


@router.get("", response_model=List[BlogPostOut])
def list_posts(
    published: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    storage: DatabaseStorage = Depends(get_storage)
):
    """
    List blog posts, newest first.

    Published posts only by default; ``published=false`` lists every post
    and requires admin credentials.

    Args:
        published: "false" to include unpublished posts; any other value is ignored
        settings: Application settings
        credentials: Bearer credentials, if sent
        storage: Persistence layer

    Returns:
        List[BlogPostOut]: Blog posts

    Raises:
        HTTPException: If unpublished posts are requested without admin access
    """
    published_only = published != "false"
    if not published_only:
        check_admin(settings, credentials)

    logger.info(f"Fetching blog posts (published_only={published_only})")
    try:
        posts = storage.list_blog_posts(published_only=published_only)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to fetch blog posts", e)

    logger.info(f"Found {len(posts)} blog posts")
    return posts


@router.get("/{slug}", response_model=BlogPostOut)
def get_post(
    slug: str,
    admin: bool = Depends(is_admin),
    storage: DatabaseStorage = Depends(get_storage)
):
    """
    Get a blog post by slug.

    Unpublished posts are only visible to admins; everyone else gets the
    same 404 as for a slug that does not exist.

    Raises:
        HTTPException: If post not found or not visible to the caller
    """
    logger.info(f"Fetching blog post: {slug}")
    try:
        post = storage.get_blog_post(slug)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to fetch blog post", e)

    if post is None or (not post.published and not admin):
        logger.warning(f"Blog post not found: {slug}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND
        )

    return post


@router.post(
    "",
    response_model=BlogPostOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)]
)
def create_post(payload: Any = Depends(json_body), storage: DatabaseStorage = Depends(get_storage)):
    """
    Create a blog post.

    Raises:
        HTTPException: If the body is invalid or the slug is taken
    """
    result = validate_payload(BlogPostCreate, payload)
    if not result.success:
        logger.warning("Invalid blog post data received")
        raise invalid_data_error("Invalid blog post data", result.errors)

    logger.info(f"Creating blog post: {result.data.slug}")
    try:
        return storage.create_blog_post(result.data.model_dump())
    except DuplicateSlugError as e:
        raise duplicate_slug_error("Invalid blog post data", e)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to create blog post", e)


@router.put("/{post_id}", response_model=BlogPostOut, dependencies=[Depends(require_admin)])
def update_post(
    post_id: str,
    payload: Any = Depends(json_body),
    storage: DatabaseStorage = Depends(get_storage)
):
    """
    Update the supplied fields of a blog post.

    Args:
        post_id: Blog post ID
        payload: Any subset of the blog post fields

    Raises:
        HTTPException: If the body is invalid or the post does not exist
    """
    result = validate_payload(BlogPostUpdate, payload)
    if not result.success:
        logger.warning(f"Invalid update for blog post {post_id}")
        raise invalid_data_error("Invalid blog post data", result.errors)

    logger.info(f"Updating blog post {post_id}")
    try:
        post = storage.update_blog_post(post_id, result.data.model_dump(exclude_unset=True))
    except DuplicateSlugError as e:
        raise duplicate_slug_error("Invalid blog post data", e)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to update blog post", e)

    if post is None:
        logger.warning(f"Blog post not found: {post_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND
        )

    return post


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)]
)
def delete_post(post_id: str, storage: DatabaseStorage = Depends(get_storage)):
    """Delete a blog post."""
    logger.info(f"Deleting blog post {post_id}")
    try:
        deleted = storage.delete_blog_post(post_id)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to delete blog post", e)

    if not deleted:
        logger.warning(f"Blog post not found: {post_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
