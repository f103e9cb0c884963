"""Outcome -> HTTP error mapping."""
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder

from core.domain.result import Outcome


def raise_for_outcome(outcome: Outcome) -> None:
    """Raise an HTTPException carrying the outcome's status, kind and details."""
    if outcome.ok:
        return
    raise HTTPException(
        status_code=outcome.status,
        detail=jsonable_encoder(
            {
                "error": outcome.error.value if outcome.error else None,
                "message": outcome.message,
                **outcome.details,
            }
        ),
    )


def forbidden(message: str = "Not allowed") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail={"error": "forbidden", "message": message})


def unauthorized(message: str = "Authentication required") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail={"error": "unauthorized", "message": message}
    )
