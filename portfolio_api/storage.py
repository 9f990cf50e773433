"""Persistence layer: one method per entity per verb."""

import logging
from typing import Any, Dict, List, Optional
from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio_api.database import get_db
from portfolio_api.models import User, BlogPost, Project, ContactSubmission, utcnow

# Configure logging
logger = logging.getLogger(__name__)


class DuplicateSlugError(Exception):
    """Raised when an insert or update would reuse an existing slug."""

    def __init__(self, slug: Optional[str]):
        super().__init__(f"Slug already exists: {slug}")
        self.slug = slug


class DatabaseStorage:
    """
    Typed queries against the users, blog_posts, projects and
    contact_submissions tables.

    Each call is a single statement followed by a commit. Missing rows are
    reported through ``None``/``False`` return values, never exceptions.
    """

    def __init__(self, db: Session):
        self.db = db

    # User methods
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, data: Dict[str, Any]) -> User:
        user = User(**data)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Created user: {user.id}")
        return user

    # Blog methods
    def list_blog_posts(self, published_only: bool = False) -> List[BlogPost]:
        """
        List blog posts newest-first by creation time.

        Args:
            published_only: Restrict to posts with published=True

        Returns:
            List[BlogPost]: Ordered blog posts
        """
        query = self.db.query(BlogPost)
        if published_only:
            query = query.filter(BlogPost.published.is_(True))
        return query.order_by(BlogPost.created_at.desc()).all()

    def get_blog_post(self, slug: str) -> Optional[BlogPost]:
        return self.db.query(BlogPost).filter(BlogPost.slug == slug).first()

    def create_blog_post(self, data: Dict[str, Any]) -> BlogPost:
        return self._insert(BlogPost(**data))

    def update_blog_post(self, post_id: str, data: Dict[str, Any]) -> Optional[BlogPost]:
        return self._update(BlogPost, post_id, data)

    def delete_blog_post(self, post_id: str) -> bool:
        return self._delete(BlogPost, post_id)

    # Project methods
    def list_projects(self, featured_only: bool = False) -> List[Project]:
        """
        List projects by orderIndex, newest-first within equal indexes.

        Args:
            featured_only: Restrict to projects with featured=True

        Returns:
            List[Project]: Ordered projects
        """
        query = self.db.query(Project)
        if featured_only:
            query = query.filter(Project.featured.is_(True))
        return query.order_by(Project.order_index.asc(), Project.created_at.desc()).all()

    def get_project(self, slug: str) -> Optional[Project]:
        return self.db.query(Project).filter(Project.slug == slug).first()

    def create_project(self, data: Dict[str, Any]) -> Project:
        return self._insert(Project(**data))

    def update_project(self, project_id: str, data: Dict[str, Any]) -> Optional[Project]:
        return self._update(Project, project_id, data)

    def delete_project(self, project_id: str) -> bool:
        return self._delete(Project, project_id)

    # Contact methods
    def list_contact_submissions(self) -> List[ContactSubmission]:
        return (
            self.db.query(ContactSubmission)
            .order_by(ContactSubmission.created_at.desc())
            .all()
        )

    def create_contact_submission(self, data: Dict[str, Any]) -> ContactSubmission:
        return self._insert(ContactSubmission(**data))

    def mark_contact_submission_read(self, submission_id: str) -> bool:
        """
        Set the read flag on a submission.

        Returns:
            bool: False if no submission has this id
        """
        updated = (
            self.db.query(ContactSubmission)
            .filter(ContactSubmission.id == submission_id)
            .update({ContactSubmission.read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated > 0

    # Shared helpers
    def _insert(self, row):
        self.db.add(row)
        self._commit(getattr(row, "slug", None))
        self.db.refresh(row)
        logger.info(f"Created {row.__tablename__} row: {row.id}")
        return row

    def _update(self, model, row_id: str, data: Dict[str, Any]):
        row = self.db.query(model).filter(model.id == row_id).first()
        if row is None:
            return None

        for key, value in data.items():
            setattr(row, key, value)
        # Always advanced server-side, whatever the caller sent.
        row.updated_at = utcnow()

        self._commit(data.get("slug"))
        self.db.refresh(row)
        logger.info(f"Updated {model.__tablename__} row: {row_id}")
        return row

    def _delete(self, model, row_id: str) -> bool:
        deleted = (
            self.db.query(model)
            .filter(model.id == row_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Delete {model.__tablename__} row {row_id}: {deleted} removed")
        return deleted > 0

    def _commit(self, slug: Optional[str]):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if slug is not None and "slug" in str(e.orig).lower():
                raise DuplicateSlugError(slug) from e
            raise


def get_storage(db: Session = Depends(get_db)) -> DatabaseStorage:
    """Dependency returning storage bound to the request's session."""
    return DatabaseStorage(db)
