from datetime import datetime
from typing import Dict, Any

import structlog
from fastapi import APIRouter, Depends

from ...dependencies import get_llm_service, get_session_store
from ....config import get_settings
from ....services.llm_service import LLMService
from ....services.session_store import SessionStore

logger = structlog.get_logger(__name__)
settings = get_settings()

router = APIRouter()


@router.get("/health")
async def health_check(
    llm_service: LLMService = Depends(get_llm_service),
    session_store: SessionStore = Depends(get_session_store)
) -> Dict[str, Any]:
    providers = [provider.value for provider in llm_service.get_available_providers()]

    return {
        "status": "healthy",
        "service": "Exam Question Generator",
        "version": "0.1.0",
        "environment": "development" if settings.debug else "production",
        "ai_providers": providers,
        "active_sessions": len(session_store) if hasattr(session_store, "__len__") else None,
        "timestamp": datetime.utcnow().isoformat()
    }
