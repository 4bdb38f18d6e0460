"""Applications API Router"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
import logging

from jobtracker.tracker.filters import ALL
from jobtracker.tracker.models import ApplicationStatus
from ..dependencies import get_application_service, get_current_user
from ..exceptions import ValidationException
from ..services import ApplicationService
from ..models.tracker_models import ApplicationPayload, ApplicationResponse
from ..models.responses import ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["applications"])

_ID_ERRORS = {400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def _parse_status_filter(value: Optional[str]) -> Optional[ApplicationStatus]:
    if value is None or value == ALL:
        return None
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise ValidationException("status", f"Unknown status '{value}'") from None


@router.get(
    "",
    response_model=List[ApplicationResponse],
    responses={401: {"model": ErrorResponse}},
    summary="List own applications",
    description="All of the caller's applications, newest date first",
)
def list_applications(
    status_filter: Optional[str] = Query(None, alias="status", description="Status value or 'all'"),
    user: dict = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
) -> List[ApplicationResponse]:
    return service.list_applications(user["id"], _parse_status_filter(status_filter))


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Create an application",
)
def create_application(
    payload: ApplicationPayload,
    user: dict = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationResponse:
    return service.create_application(user["id"], payload)


@router.get(
    "/{app_id}",
    response_model=ApplicationResponse,
    responses=_ID_ERRORS,
    summary="Get one application",
)
def get_application(
    app_id: str,
    user: dict = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationResponse:
    return service.get_application(user["id"], app_id)


@router.put(
    "/{app_id}",
    response_model=ApplicationResponse,
    responses=_ID_ERRORS,
    summary="Replace an application",
)
def update_application(
    app_id: str,
    payload: ApplicationPayload,
    user: dict = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationResponse:
    return service.update_application(user["id"], app_id, payload)


@router.delete(
    "/{app_id}",
    response_model=MessageResponse,
    responses=_ID_ERRORS,
    summary="Delete an application",
)
def delete_application(
    app_id: str,
    user: dict = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
) -> MessageResponse:
    return MessageResponse(message=service.delete_application(user["id"], app_id))
