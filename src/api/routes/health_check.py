from fastapi import APIRouter

from src.api.responses import SuccessEnvelope, success

router = APIRouter()


@router.get("/health", response_model=SuccessEnvelope[dict])
async def health_check():
    return success({"healthy": True})
