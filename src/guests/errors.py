from typing import NoReturn

from fastapi import HTTPException, status

from src.guests.dtos import ErrorCode

ERROR_STATUS_CODES = {
    ErrorCode.MISSING_INVITE_CODE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INVITE_CODE: status.HTTP_404_NOT_FOUND,
    ErrorCode.PRIMARY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.ALREADY_LINKED: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_INVITED: status.HTTP_403_FORBIDDEN,
    ErrorCode.CODE_SPACE_EXHAUSTED: status.HTTP_503_SERVICE_UNAVAILABLE,
}

ERROR_MESSAGES = {
    ErrorCode.MISSING_INVITE_CODE: "Invite code is required",
    ErrorCode.INVALID_INVITE_CODE: "Invalid invite code",
    ErrorCode.PRIMARY_NOT_FOUND: "Primary guest not found",
    ErrorCode.EVENT_NOT_FOUND: "Event not found",
    ErrorCode.NOT_AUTHENTICATED: "Not authenticated",
    ErrorCode.ALREADY_LINKED: "This invitation is already linked to another account",
    ErrorCode.NOT_INVITED: "You are not invited to this event",
    ErrorCode.CODE_SPACE_EXHAUSTED: "Could not generate a unique invite code",
}


def raise_for_error(error: ErrorCode) -> NoReturn:
    """Turn a failed result into the matching HTTP error."""
    raise HTTPException(
        status_code=ERROR_STATUS_CODES[error],
        detail={"error": error.value, "message": ERROR_MESSAGES[error]},
    )
