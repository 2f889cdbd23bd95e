from fastapi import APIRouter

from skillproof import __version__

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness probe for the evidence engine.")
async def health_check():
    return {"status": "healthy", "version": __version__}
