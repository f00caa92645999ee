from fastapi import APIRouter

from .relay.route import router as relay_router

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok"}


router.include_router(relay_router)
