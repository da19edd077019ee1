"""Standalone grading and proofreading endpoints."""
import logging
import traceback

from fastapi import APIRouter, HTTPException

from essay.models.grading import GradingReport
from essay.models.proofreading import ProofreadingResult
from essay.services.grading_service import GradingService
from essay.services.proofreading_service import ProofreadingService
from shared.models.schemas import TextRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["grading"])


@router.post("/grading/check", response_model=GradingReport)
def check_essay(request: TextRequest):
    """Grade arbitrary essay text through the provider fallback chain."""
    if not request.content.strip():
        raise HTTPException(status_code=400, detail="No content provided")
    try:
        return GradingService.from_settings().grade(request.content)
    except Exception as e:
        logger.error(f"Error grading essay: {str(e)}\n{traceback.format_exc()}")
        raise HTTPException(
            status_code=500,
            detail={"message": f"Error grading essay: {str(e)}", "type": type(e).__name__},
        )


@router.post("/proofreading", response_model=ProofreadingResult)
def proofread(request: TextRequest):
    """Automated proofreading with style suggestions."""
    if not request.content.strip():
        raise HTTPException(status_code=400, detail="No content provided")
    try:
        return ProofreadingService.from_settings().proofread(request.content)
    except Exception as e:
        logger.error(f"Error proofreading essay: {str(e)}\n{traceback.format_exc()}")
        raise HTTPException(
            status_code=500,
            detail={"message": f"Error proofreading essay: {str(e)}", "type": type(e).__name__},
        )
