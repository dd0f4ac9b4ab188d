# storebuilder/api/admin/services/delivery_coverage.py

from typing import Dict, List, Sequence, Union

from storebuilder.api.admin.services.delivery_errors import DestinationUnavailableError
from storebuilder.api.schemas.store.delivery.delivery_zone import (
    DeliveryConfiguration,
    DeliveryDestination,
    DeliveryZone,
)


def compute_unassigned(zones: Sequence[DeliveryZone], known_locations: Sequence[str]) -> List[str]:
    """Cidades que não estão em nenhuma zona, na ordem de `known_locations`"""
    assigned = {city for zone in zones for city in zone.cities}
    return [city for city in known_locations if city not in assigned]


def effective_fee(configuration: DeliveryConfiguration, zone: DeliveryZone) -> Union[int, float]:
    # Frete grátis zera a cobrança, mas a taxa salva na zona é mantida
    return 0 if configuration.is_free_delivery else zone.fee


def _enabled_zone_by_city(configuration: DeliveryConfiguration) -> Dict[str, DeliveryZone]:
    # Em registros antigos com cidades repetidas, a última zona ativa vence
    return {
        city: zone
        for zone in configuration.zones
        if zone.enabled
        for city in zone.cities
    }


def _destination(configuration: DeliveryConfiguration, city: str, zone: DeliveryZone) -> DeliveryDestination:
    return DeliveryDestination(
        city=city,
        fee=effective_fee(configuration, zone),
        zone_id=zone.id,
    )


def available_destinations(
        configuration: DeliveryConfiguration,
        known_locations: Sequence[str],
) -> List[DeliveryDestination]:
    """Cidades oferecidas no checkout: apenas as que estão em zonas ativas"""
    zone_by_city = _enabled_zone_by_city(configuration)

    return [
        _destination(configuration, city, zone_by_city[city])
        for city in known_locations
        if city in zone_by_city
    ]


def quote_delivery_fee(configuration: DeliveryConfiguration, city: str) -> DeliveryDestination:
    """
    Taxa efetiva para entregar em `city`.

    Raises:
        DestinationUnavailableError: cidade sem zona ou em zona desativada
    """
    zone = _enabled_zone_by_city(configuration).get(city)
    if zone is None:
        raise DestinationUnavailableError(city)

    return _destination(configuration, city, zone)
