import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from vidyagiri.core.deps import get_query_responder
from vidyagiri.schemas.query import (
    ErrorResponse,
    QueryRequest,
    QueryResponse,
    ResponseMode,
    ResponseOptions,
)
from vidyagiri.services.query.responder import GENERIC_ERROR, QueryResponder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


async def _answer(mode: ResponseMode, data: QueryRequest, responder: QueryResponder):
    try:
        return await responder.answer(
            data.message,
            mode=mode,
            preferred_style=data.preferred_style,
            options=ResponseOptions.from_request(data),
        )
    except Exception as e:
        logger.exception(f"Error processing {mode.value} request")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=GENERIC_ERROR, details=str(e)).model_dump(),
        )


@router.post(
    "/",
    response_model=QueryResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
async def query_standard(
    data: QueryRequest,
    responder: QueryResponder = Depends(get_query_responder),
):
    """Answer a query from fresh web evidence in the caller's learning style."""
    return await _answer(ResponseMode.STANDARD, data, responder)


@router.post(
    "/{mode}",
    response_model=QueryResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
async def query_with_mode(
    mode: ResponseMode,
    data: QueryRequest,
    responder: QueryResponder = Depends(get_query_responder),
):
    """Answer a query in a specific response mode."""
    return await _answer(mode, data, responder)


@router.post("/{mode}/stream")
async def query_stream(
    mode: ResponseMode,
    data: QueryRequest,
    request: Request,
    responder: QueryResponder = Depends(get_query_responder),
):
    """Stream the answer as Server-Sent Events."""
    return StreamingResponse(
        responder.answer_stream(
            data.message,
            mode=mode,
            preferred_style=data.preferred_style,
            options=ResponseOptions.from_request(data),
            is_disconnected=request.is_disconnected,
        ),
        media_type="text/event-stream",
    )
