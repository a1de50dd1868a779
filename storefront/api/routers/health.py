from fastapi import APIRouter

from storefront.utils.settings import SERVICE_NAME

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "service": SERVICE_NAME}
