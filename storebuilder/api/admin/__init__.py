from fastapi import APIRouter

from storebuilder.api.admin.routes.delivery_zones import router as delivery_zones_router, \
    locations_router as delivery_locations_router

router = APIRouter(prefix="/admin")
router.include_router(delivery_zones_router)
router.include_router(delivery_locations_router)
