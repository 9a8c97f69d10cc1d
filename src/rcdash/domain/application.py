"""Application domain service."""

from typing import Optional

from rcdash.database.base import Database
from rcdash.domain.entities import Application as ApplicationEntity
from rcdash.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    application_not_found,
    duplicate_application_name,
)


class ApplicationService:
    """Service for managing applications."""

    def __init__(self, db: Database):
        """Initialize application service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_application(self, name: str) -> int:
        """Create a new application.

        Args:
            name: Application name

        Returns:
            Application ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If an application with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Application name is required")
        if self.db.get_application_by_name(name) is not None:
            raise ConflictError(duplicate_application_name(name))
        return self.db.create_application(name)

    def get_application(self, application_id: int) -> Optional[ApplicationEntity]:
        """Get application by ID.

        Returns:
            Application entity or None if not found
        """
        return self.db.get_application(application_id)

    def list_applications(self) -> list[ApplicationEntity]:
        """List all applications ordered by name."""
        return self.db.list_applications()

    def delete_application(self, application_id: int) -> None:
        """Delete an application and everything recorded for it.

        Dictionary entries, success-rate facts and unmapped codes of the
        application are removed with it.

        Raises:
            NotFoundError: If the application does not exist
        """
        if self.db.get_application(application_id) is None:
            raise NotFoundError(application_not_found(application_id))
        self.db.delete_application(application_id)
