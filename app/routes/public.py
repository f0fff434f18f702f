import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health(request: Request):
    """
    Basic health check: reports whether the database answers.
    """
    try:
        request.app.state.database.ping()
        return {"status": "ok"}
    except Exception:
        log.exception("Health check failed")
        return {"status": "error"}


@router.get("/favicon.ico")
def favicon():
    # Return empty 204 to avoid log noise for missing favicon
    return Response(status_code=204)
