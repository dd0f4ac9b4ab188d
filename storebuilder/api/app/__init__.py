from fastapi import APIRouter

from storebuilder.api.app.routes.delivery import router as delivery_router

router = APIRouter(prefix="/app")

router.include_router(delivery_router)
