"""Projects router for the portfolio project list."""

import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError

from portfolio_api.auth import require_admin
from portfolio_api.schemas import ProjectCreate, ProjectUpdate, ProjectOut, validate_payload
from portfolio_api.storage import DatabaseStorage, DuplicateSlugError, get_storage
from portfolio_api.routers.errors import json_body, duplicate_slug_error, invalid_data_error, server_error

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])

NOT_FOUND = "Project not found"


@router.get("", response_model=List[ProjectOut])
def list_projects(featured: Optional[str] = None, storage: DatabaseStorage = Depends(get_storage)):
    """
    List projects in display order.

    Args:
        featured: "true" to return only featured projects; any other value is ignored
        storage: Persistence layer

    Returns:
        List[ProjectOut]: Projects ordered by orderIndex, newest first within ties
    """
    featured_only = featured == "true"
    logger.info(f"Fetching projects (featured_only={featured_only})")
    try:
        projects = storage.list_projects(featured_only=featured_only)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to fetch projects", e)

    logger.info(f"Found {len(projects)} projects")
    return projects


@router.get("/{slug}", response_model=ProjectOut)
def get_project(slug: str, storage: DatabaseStorage = Depends(get_storage)):
    logger.info(f"Fetching project: {slug}")
    try:
        project = storage.get_project(slug)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to fetch project", e)

    if project is None:
        logger.warning(f"Project not found: {slug}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND
        )

    return project


@router.post(
    "",
    response_model=ProjectOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)]
)
def create_project(payload: Any = Depends(json_body), storage: DatabaseStorage = Depends(get_storage)):
    """
    Create a project.

    Raises:
        HTTPException: If the body is invalid or the slug is taken
    """
    result = validate_payload(ProjectCreate, payload)
    if not result.success:
        logger.warning("Invalid project data received")
        raise invalid_data_error("Invalid project data", result.errors)

    logger.info(f"Creating project: {result.data.slug}")
    try:
        return storage.create_project(result.data.model_dump())
    except DuplicateSlugError as e:
        raise duplicate_slug_error("Invalid project data", e)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to create project", e)


@router.put("/{project_id}", response_model=ProjectOut, dependencies=[Depends(require_admin)])
def update_project(
    project_id: str,
    payload: Any = Depends(json_body),
    storage: DatabaseStorage = Depends(get_storage)
):
    """
    Update the supplied fields of a project.

    Raises:
        HTTPException: If the body is invalid or the project does not exist
    """
    result = validate_payload(ProjectUpdate, payload)
    if not result.success:
        logger.warning(f"Invalid update for project {project_id}")
        raise invalid_data_error("Invalid project data", result.errors)

    logger.info(f"Updating project {project_id}")
    try:
        project = storage.update_project(project_id, result.data.model_dump(exclude_unset=True))
    except DuplicateSlugError as e:
        raise duplicate_slug_error("Invalid project data", e)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to update project", e)

    if project is None:
        logger.warning(f"Project not found: {project_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND
        )

    return project


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)]
)
def delete_project(project_id: str, storage: DatabaseStorage = Depends(get_storage)):
    """Delete a project."""
    logger.info(f"Deleting project {project_id}")
    try:
        deleted = storage.delete_project(project_id)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to delete project", e)

    if not deleted:
        logger.warning(f"Project not found: {project_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
