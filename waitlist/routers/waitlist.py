"""
Waitlist Router - Teed Waitlist
waitlist/routers/waitlist.py

Public submission and status lookup.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import EmailStr

from waitlist.config import settings
from waitlist.core.dependencies import get_submission_service
from waitlist.core.security import limiter
from waitlist.models.application import (
    ApplicationStatusResponse,
    ErrorResponse,
    SubmissionResponse,
    WaitlistSubmission,
)
from waitlist.services.submission_service import STATUS_MESSAGES, SubmissionService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/waitlist", tags=["Waitlist"])



#  Validation Error Messages


FIELD_MESSAGES = {
    "email": {
        "missing": "Email is required",
        "value_error": "A valid email address is required",
        "string_type": "Email must be a string",
    },
    "display_name": {
        "missing": "Display name is required",
        "string_too_short": "Display name cannot be empty",
        "string_too_long": "Display name must not exceed 100 characters",
    },
    "terms_accepted": {
        "missing": "You must accept the terms to join the waitlist",
        "value_error": "You must accept the terms to join the waitlist",
        "bool_parsing": "terms_accepted must be true or false",
    },
    "equipment_interests": {
        "too_long": "Select at most 50 equipment interests",
    },
    "brand_affinities": {
        "too_long": "Select at most 50 brands",
    },
}

# camelCase and legacy form names report errors under the canonical field
FIELD_ALIASES = {
    "displayName": "display_name",
    "termsAccepted": "terms_accepted",
    "equipmentInterests": "equipment_interests",
    "equipment_interest": "equipment_interests",
    "brandAffinities": "brand_affinities",
    "brand_affinity": "brand_affinities",
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_short": "Field '{field}' is too short",
    "string_too_long": "Field '{field}' is too long",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "too_long": "Field '{field}' has too many items",
    "too_short": "Field '{field}' has too few items",
    "uuid_parsing": "Field '{field}' must be a valid UUID",
    "string_type": "Field '{field}' must be a string",
    "int_type": "Field '{field}' must be an integer",
    "int_parsing": "Field '{field}' must be a valid integer",
    "bool_parsing": "Field '{field}' must be true or false",
    "list_type": "Field '{field}' must be a list",
    "json_invalid": "Malformed JSON request body",
}


def get_validation_message(field: str, error_type: str) -> str:
    if field in FIELD_MESSAGES:
        for key in FIELD_MESSAGES[field]:
            if key in error_type:
                return FIELD_MESSAGES[field][key]
    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)
    return f"Invalid value for field '{field}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
            ).model_dump(mode="json"),
        )
    err = errors[0]
    error_type = err.get("type", "")
    if "json_invalid" in error_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="INVALID_REQUEST",
                message="Malformed JSON request body",
            ).model_dump(mode="json"),
        )
    loc = [str(part) for part in err.get("loc", []) if part not in ("body", "query")]
    if loc:
        loc[0] = FIELD_ALIASES.get(loc[0], loc[0])
    field = ".".join(loc)
    message = get_validation_message(loc[0] if loc else field, error_type)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error_code="VALIDATION_ERROR",
            message=message,
            details={"field": field, "type": error_type} if field else None,
        ).model_dump(mode="json"),
    )



#  Exception Helpers


def raise_error(status_code: int, error_code: str, message: str, details: dict = None):
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error_code=error_code, message=message, details=details).model_dump(mode="json"),
    )


def raise_application_not_found():
    raise_error(status.HTTP_404_NOT_FOUND, "APPLICATION_NOT_FOUND", "No application found for this email")



#  Routes


@router.post(
    "/submit",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already on the waitlist"},
        422: {"model": ErrorResponse, "description": "Invalid submission"},
        429: {"description": "Too many submissions from this client"},
        503: {"model": ErrorResponse, "description": "Seat claim contention, retry"},
    },
    summary="Join the waitlist",
    description="Scores the application and auto-approves it when the score clears the threshold and seats remain.",
)
@limiter.limit(settings.SUBMIT_RATE_LIMIT)
def submit_application(
    request: Request,
    submission: WaitlistSubmission,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    return service.submit(submission)


@router.get(
    "/status",
    response_model=ApplicationStatusResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Look up an application",
)
@limiter.limit(settings.STATUS_RATE_LIMIT)
def get_application_status(
    request: Request,
    email: EmailStr = Query(..., description="Email used on the application"),
    service: SubmissionService = Depends(get_submission_service),
) -> ApplicationStatusResponse:
    application = service.get_status(email)
    if application is None:
        raise_application_not_found()
    return ApplicationStatusResponse(
        status=application.status,
        message=STATUS_MESSAGES[application.status],
    )
