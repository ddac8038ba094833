import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from modules.auth.dependencies import get_host_context, require_admin
from modules.signatures.dependencies import get_signature_repository
from modules.signatures.repositories.signature_repository import SignatureRepository
from modules.signatures.schemas.signature_schemas import PageEventRequest, PageEventResponse, StatisticsResponse
from modules.signatures.services.page_lifecycle import handle_page_event

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])


@router.post(
    "/page-lifecycle",
    response_model=PageEventResponse,
    dependencies=[Depends(get_host_context)],
    summary="Apply a host page trashed/deleted event"
)
def page_lifecycle(
    payload: PageEventRequest,
    repo: SignatureRepository = Depends(get_signature_repository),
):
    try:
        affected = handle_page_event(repo, {"eventType": payload.event_type, "content": payload.content})
    except SQLAlchemyError:
        logger.exception("Storage failure while handling %s", payload.event_type)
        raise HTTPException(500, "An unexpected error occurred")
    return PageEventResponse(affected=affected)


@admin_router.get(
    "/statistics",
    response_model=StatisticsResponse,
    summary="Contract and signature counts"
)
def statistics(repo: SignatureRepository = Depends(get_signature_repository)):
    return StatisticsResponse(**repo.get_statistics())
