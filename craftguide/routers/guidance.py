"""Contextual guidance API endpoint."""
from fastapi import APIRouter, Depends

from craftguide.dependencies import get_composer
from craftguide.schemas.guidance import GuidanceRequest, GuidanceResponse
from craftguide.services.guidance import GuidanceComposer

router = APIRouter(prefix="/api/guidance", tags=["guidance"])


@router.post("", response_model=GuidanceResponse)
def compose_guidance(
    request: GuidanceRequest,
    composer: GuidanceComposer = Depends(get_composer),
):
    """
    Answer a question with cited knowledge, confidence and follow-ups.

    Collaborator outages produce a degraded 200 response rather than an error.
    """
    return composer.compose(
        request.text,
        request.user_context,
        include_tool_recommendations=request.include_tool_recommendations,
    )
