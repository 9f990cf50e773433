"""Contact router for the public contact form and its admin inbox."""

import logging
from typing import Any, List
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from portfolio_api.auth import require_admin
from portfolio_api.rate_limit import contact_rate_limit
from portfolio_api.schemas import ContactSubmissionCreate, ContactSubmissionOut, validate_payload
from portfolio_api.storage import DatabaseStorage, get_storage
from portfolio_api.routers.errors import json_body, invalid_data_error, server_error

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.get("", response_model=List[ContactSubmissionOut], dependencies=[Depends(require_admin)])
def list_submissions(storage: DatabaseStorage = Depends(get_storage)):
    """List contact submissions, newest first."""
    logger.info("Fetching contact submissions")
    try:
        submissions = storage.list_contact_submissions()
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to fetch contact submissions", e)

    logger.info(f"Found {len(submissions)} contact submissions")
    return submissions


@router.post(
    "",
    response_model=ContactSubmissionOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(contact_rate_limit)]
)
def create_submission(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: Any = Depends(json_body),
    storage: DatabaseStorage = Depends(get_storage)
):
    """
    Store a contact form submission and notify the site owner.

    The notification email is sent after the response and never affects it;
    the stored row is the source of truth.

    Args:
        request: Incoming request, used to reach the notifier
        background_tasks: Queue for the notification email
        payload: Contact form fields
        storage: Persistence layer

    Returns:
        ContactSubmissionOut: The stored submission

    Raises:
        HTTPException: If the body is invalid or the row cannot be stored
    """
    result = validate_payload(ContactSubmissionCreate, payload)
    if not result.success:
        logger.warning("Invalid contact submission data received")
        raise invalid_data_error("Invalid contact submission data", result.errors)

    try:
        submission = storage.create_contact_submission(result.data.model_dump())
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to create contact submission", e)

    logger.info(f"Contact submission stored: {submission.id}")
    background_tasks.add_task(request.app.state.notifier.notify, submission)
    return submission


@router.patch(
    "/{submission_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)]
)
def mark_read(submission_id: str, storage: DatabaseStorage = Depends(get_storage)):
    """Mark a contact submission as read."""
    logger.info(f"Marking contact submission read: {submission_id}")
    try:
        updated = storage.mark_contact_submission_read(submission_id)
    except SQLAlchemyError as e:
        raise server_error(storage, "Failed to mark contact submission as read", e)

    if not updated:
        logger.warning(f"Contact submission not found: {submission_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact submission not found"
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
