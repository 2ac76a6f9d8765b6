# hoozin/api/errors.py
from fastapi import HTTPException, status

from hoozin.services.google_client import AuthenticationRequiredError, GoogleClientError


def upstream_http_exception(exc: GoogleClientError) -> HTTPException:
    """
    Translate a Google client failure into the HTTP error shown to users.

    - AuthenticationRequiredError -> 401, the sign-in flow must run again.
    - Any other GoogleClientError -> 502.
    """
    if isinstance(exc, AuthenticationRequiredError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Upstream calendar request failed: {exc}",
    )
