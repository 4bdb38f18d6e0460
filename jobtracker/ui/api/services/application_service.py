"""Owner-scoped CRUD for application records"""

import logging
from typing import List, Optional

from jobtracker.tracker.models import ApplicationStatus
from ..database import TrackerDatabase
from ..exceptions import ResourceNotFoundException
from ..models.tracker_models import ApplicationPayload, ApplicationResponse

logger = logging.getLogger(__name__)


def _row_to_application(row: dict) -> ApplicationResponse:
    return ApplicationResponse(
        id=row["id"],
        user=row["user_id"],
        job_title=row["job_title"],
        company=row["company"],
        location=row.get("location"),
        date=row["date"],
        status=row["status"],
        notes=row.get("notes"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ApplicationService:
    """Service for a user's job applications.

    Records owned by another user are reported as not found, so callers
    cannot probe for other users' ids.
    """

    def __init__(self, db: TrackerDatabase):
        self.db = db

    def list_applications(
        self, user_id: str, status: Optional[ApplicationStatus] = None
    ) -> List[ApplicationResponse]:
        rows = self.db.get_applications(user_id, status.value if status else None)
        return [_row_to_application(r) for r in rows]

    def get_application(self, user_id: str, app_id: str) -> ApplicationResponse:
        row = self.db.get_application(app_id, user_id)
        if not row:
            raise ResourceNotFoundException("Application not found")
        return _row_to_application(row)

    def create_application(self, user_id: str, payload: ApplicationPayload) -> ApplicationResponse:
        row = self.db.create_application(user_id, payload.to_record())
        logger.info(f"User {user_id} created application {row['id']}")
        return _row_to_application(row)

    def update_application(
        self, user_id: str, app_id: str, payload: ApplicationPayload
    ) -> ApplicationResponse:
        row = self.db.update_application(app_id, user_id, payload.to_record())
        if not row:
            raise ResourceNotFoundException(
                "Application not found or you are not authorized to update it"
            )
        return _row_to_application(row)

    def delete_application(self, user_id: str, app_id: str) -> str:
        if not self.db.delete_application(app_id, user_id):
            raise ResourceNotFoundException(
                "Application not found or you are not authorized to delete it"
            )
        logger.info(f"User {user_id} deleted application {app_id}")
        return "Application deleted successfully"
