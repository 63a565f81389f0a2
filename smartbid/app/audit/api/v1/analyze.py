"""Generative-AI relay endpoint."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from smartbid.app.audit.api.deps import get_llm_client
from smartbid.app.audit.exceptions import AuditError
from smartbid.app.audit.service.llm_service import GeminiClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post('/analyze')
async def analyze(
    body: dict[str, Any] = Body(...),
    llm: GeminiClient = Depends(get_llm_client),
) -> Any:
    """Relay ``{contents, systemInstruction, generationConfig}`` to Gemini.

    Returns the provider JSON verbatim, or 500 ``{"error": message}`` on any
    failure.
    """
    try:
        return await llm.generate_content(body)
    except AuditError as e:
        return JSONResponse(status_code=500, content={'error': e.message})
    except Exception as e:
        logger.error(f'[LLM] Unexpected relay failure: {e}', exc_info=True)
        return JSONResponse(status_code=500, content={'error': str(e) or 'Google API Error'})
