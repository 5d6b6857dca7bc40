"""
Tutoring endpoint.

POST /api/ask — answer a question, with base64 speech when TTS is enabled.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from lawdio.dependencies.services import get_tutor_service
from lawdio.models.schemas import AskRequest, AskResponse, ErrorResponse
from lawdio.services.tutor import TutorService

router = APIRouter()


@router.post(
    "/ask",
    response_model=AskResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ask(
    payload: Optional[AskRequest] = None,
    tutor: TutorService = Depends(get_tutor_service),
) -> AskResponse:
    """
    Forward the question to the tutor model.  A missing or empty question is
    rejected before any upstream call is made.
    """
    question = payload.question if payload else None
    result = await tutor.answer(question)
    return AskResponse(
        answer_text=result.answer_text,
        audio_base64=result.audio_base64,
        warning=result.warning,
    )
