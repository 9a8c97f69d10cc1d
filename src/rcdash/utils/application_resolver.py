"""Utility for resolving application names to IDs."""

from rcdash.domain.application import ApplicationService
from rcdash.domain.errors import NotFoundError


def resolve_application(application_service: ApplicationService, application: str | int) -> int:
    """Resolve application name or ID to application ID.

    Args:
        application_service: ApplicationService instance
        application: Application name (str) or ID (int or string representation of int)

    Returns:
        Application ID

    Raises:
        NotFoundError: If application is not found
    """
    if isinstance(application, int):
        application_id = application
    else:
        try:
            application_id = int(application)
        except (ValueError, TypeError):
            # Not a number, treat as name
            application_id = None

    if application_id is not None:
        if application_service.get_application(application_id) is None:
            raise NotFoundError(f"Application ID {application_id} not found")
        return application_id

    for app in application_service.list_applications():
        if app.name == application:
            return app.id

    raise NotFoundError(f"Application '{application}' not found")
