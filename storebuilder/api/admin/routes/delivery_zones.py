from fastapi import APIRouter, HTTPException
from starlette import status

from storebuilder.api.admin.services.delivery_coverage import compute_unassigned
from storebuilder.api.admin.services.delivery_errors import DeliveryStorageError
from storebuilder.api.admin.services.delivery_zone_editor import delete_zone, toggle_zone, upsert_zone
from storebuilder.api.admin.services.delivery_zone_service import DeliveryZoneService
from storebuilder.api.schemas.store.delivery.delivery_zone import (
    DeliveryConfigurationOut,
    DeliveryConfigurationUpdate,
    DeliveryLocationsOut,
    ZoneEditResponse,
    ZoneListRequest,
    ZoneUpsertRequest,
)
from storebuilder.core.database import GetDBDep
from storebuilder.core.defaults.delivery_locations import IRAQ_CITIES, PRIMARY_CITY
from storebuilder.core.dependencies import GetStoreDep
from storebuilder.core.utils.enums import ZoneRejection

router = APIRouter(prefix="/stores/{store_id}/delivery", tags=["Delivery Zones"])

locations_router = APIRouter(prefix="/delivery", tags=["Delivery Zones"])


def _storage_unavailable(e: DeliveryStorageError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={
            'message': str(e),
            'code': 'DELIVERY_STORAGE_ERROR'
        }
    )


@router.get("", response_model=DeliveryConfigurationOut,
            summary="Carrega as zonas de entrega (migrando formatos antigos)")
def get_delivery_configuration(store: GetStoreDep, db: GetDBDep):
    service = DeliveryZoneService(db)
    try:
        configuration, source = service.load_with_source(store.id)
        zone_limit = service.get_zone_limit(store.id)
    except DeliveryStorageError as e:
        raise _storage_unavailable(e)

    return DeliveryConfigurationOut(
        zones=configuration.zones,
        is_free_delivery=configuration.is_free_delivery,
        unassigned=compute_unassigned(configuration.zones, IRAQ_CITIES),
        source_format=source,
        zone_limit=zone_limit,
    )


@router.put("", response_model=DeliveryConfigurationOut,
            summary="Salva as zonas e o frete grátis (substitui o registro inteiro)")
def save_delivery_configuration(
        store: GetStoreDep,
        db: GetDBDep,
        payload: DeliveryConfigurationUpdate,
):
    service = DeliveryZoneService(db)
    try:
        zone_limit = service.get_zone_limit(store.id)
        if zone_limit is not None and len(payload.zones) > zone_limit:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    'message': f'O plano da loja permite no máximo {zone_limit} zona(s)',
                    'code': ZoneRejection.ZONE_LIMIT_REACHED.value
                }
            )

        configuration = service.save(store.id, payload)
    except DeliveryStorageError as e:
        raise _storage_unavailable(e)

    return DeliveryConfigurationOut(
        zones=configuration.zones,
        is_free_delivery=configuration.is_free_delivery,
        unassigned=compute_unassigned(configuration.zones, IRAQ_CITIES),
        zone_limit=zone_limit,
    )


@router.post("/zones", response_model=ZoneEditResponse,
             summary="Cria ou edita uma zona sobre a lista atual do editor")
def upsert_delivery_zone(store: GetStoreDep, db: GetDBDep, payload: ZoneUpsertRequest):
    try:
        zone_limit = DeliveryZoneService(db).get_zone_limit(store.id)
    except DeliveryStorageError as e:
        raise _storage_unavailable(e)

    result = upsert_zone(
        payload.zones,
        payload.zone.to_zone(),
        known_locations=IRAQ_CITIES,
        max_zones=zone_limit,
    )

    return ZoneEditResponse(
        zones=result.zones,
        rejected=result.rejected,
        message=result.message,
        unassigned=compute_unassigned(result.zones, IRAQ_CITIES),
    )


@router.post("/zones/{zone_id}/toggle", response_model=ZoneEditResponse,
             summary="Ativa ou desativa uma zona")
def toggle_delivery_zone(store: GetStoreDep, zone_id: str, payload: ZoneListRequest):
    zones = toggle_zone(payload.zones, zone_id)
    return ZoneEditResponse(zones=zones, unassigned=compute_unassigned(zones, IRAQ_CITIES))


@router.post("/zones/{zone_id}/delete", response_model=ZoneEditResponse,
             summary="Remove uma zona; as cidades dela ficam sem entrega")
def delete_delivery_zone(store: GetStoreDep, zone_id: str, payload: ZoneListRequest):
    zones = delete_zone(payload.zones, zone_id)
    return ZoneEditResponse(zones=zones, unassigned=compute_unassigned(zones, IRAQ_CITIES))


@locations_router.get("/locations", response_model=DeliveryLocationsOut,
                      summary="Lista as províncias atendidas")
def list_delivery_locations():
    return DeliveryLocationsOut(locations=IRAQ_CITIES, primary_city=PRIMARY_CITY)
