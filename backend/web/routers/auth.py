"""Token endpoint for the browser-side thread list client."""

import logging
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Depends, HTTPException

from backend.web.core.dependencies import get_app

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/assistant-ui-token")
async def issue_token(app: Annotated[Any, Depends(get_app)] = None) -> dict[str, str]:
    issuer = app.state.token_issuer
    if issuer is None:
        raise HTTPException(status_code=503, detail="Thread registry is not configured")
    try:
        token = await issuer()
    except httpx.HTTPError as e:
        logger.warning("Token issuance failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Token issuance failed: {e}") from e
    return {"token": token}
