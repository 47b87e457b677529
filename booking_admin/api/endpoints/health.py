from fastapi import APIRouter

from booking_admin import __version__
from booking_admin.config.settings import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health():
    return {"status": "healthy", "service": settings.APP_NAME, "version": __version__}
