import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from storycase.core.errors import GenerationError, MalformedResponseError
from storycase.schemas.testcase import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
)
from storycase.services.generation_service import GenerationService


logger = logging.getLogger(__name__)

router = APIRouter()

MALFORMED_RESPONSE_MESSAGE = "Model did not return valid JSON"
MISSING_PROMPT_MESSAGE = "A non-empty 'prompt' or 'description' is required."


def get_service(request: Request) -> GenerationService:
    return request.app.state.generation_service


def error_response(status_code: int, message: str, raw: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, raw=raw).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Generate test cases from a user story",
)
async def generate(
    payload: GenerateRequest,
    service: GenerationService = Depends(get_service),
):
    """
    Build the prompt, call the model once and return the normalized test
    cases. Either the whole list is returned or an error; never a mix.
    """
    if not payload.prompt or not payload.prompt.strip():
        logger.warning("Rejected /generate call without prompt (issue=%s)", payload.issue_key)
        return error_response(status.HTTP_400_BAD_REQUEST, MISSING_PROMPT_MESSAGE)

    if payload.issue_key:
        logger.info("Generating test cases for issue %s", payload.issue_key)

    try:
        cases = await service.generate(payload.prompt)
    except MalformedResponseError as exc:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            MALFORMED_RESPONSE_MESSAGE,
            raw=exc.raw,
        )
    except GenerationError as exc:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    except Exception as exc:
        logger.exception("Unexpected failure while generating test cases")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or exc.__class__.__name__)

    return GenerateResponse(testCases=cases)
