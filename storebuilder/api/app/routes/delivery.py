from fastapi import APIRouter, HTTPException, Query
from starlette import status

from storebuilder.api.admin.services.delivery_errors import DeliveryStorageError, DestinationUnavailableError
from storebuilder.api.admin.services.delivery_zone_service import DeliveryZoneService
from storebuilder.api.schemas.store.delivery.delivery_zone import DeliveryDestinationsOut, DeliveryQuoteOut
from storebuilder.core.database import GetDBDep
from storebuilder.core.dependencies import GetPublicStoreDep

router = APIRouter(tags=["Entrega"], prefix="/stores/{store_id}/delivery")


@router.get("/destinations", response_model=DeliveryDestinationsOut)
def get_delivery_destinations(store: GetPublicStoreDep, db: GetDBDep):
    try:
        configuration, destinations = DeliveryZoneService(db).list_destinations(store.id)
    except DeliveryStorageError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="Entrega temporariamente indisponível")

    return DeliveryDestinationsOut(
        is_free_delivery=configuration.is_free_delivery,
        destinations=destinations,
    )


@router.get("/quote", response_model=DeliveryQuoteOut)
def get_delivery_quote(store: GetPublicStoreDep, db: GetDBDep, city: str = Query(..., min_length=1)):
    try:
        configuration, destination = DeliveryZoneService(db).quote(store.id, city)
    except DestinationUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                'message': str(e),
                'code': 'DESTINATION_UNAVAILABLE'
            }
        )
    except DeliveryStorageError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="Entrega temporariamente indisponível")

    return DeliveryQuoteOut(
        city=destination.city,
        fee=destination.fee,
        zone_id=destination.zone_id,
        is_free_delivery=configuration.is_free_delivery,
    )
