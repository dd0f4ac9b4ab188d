# storebuilder/api/admin/services/delivery_zone_editor.py
"""
Editor de zonas de entrega.

Funções puras sobre a lista de zonas da sessão de edição: nunca alteram a
lista recebida, sempre devolvem uma nova. A regra central é que cada cidade
pertence a no máximo uma zona; ao salvar uma zona, as cidades escolhidas são
retiradas das outras (a última edição vence).
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel

from storebuilder.api.schemas.store.delivery.delivery_zone import DeliveryZone
from storebuilder.core.utils.enums import ZoneRejection

REJECTION_MESSAGES = {
    ZoneRejection.EMPTY_NAME: 'يرجى إدخال اسم المنطقة',
    ZoneRejection.EMPTY_CITIES: 'يرجى اختيار محافظة واحدة على الأقل',
    ZoneRejection.UNKNOWN_CITY: 'محافظة غير معروفة',
    ZoneRejection.ZONE_LIMIT_REACHED: 'لقد وصلت إلى الحد الأقصى لعدد مناطق التوصيل في باقتك',
}


class ZoneEditResult(BaseModel):
    zones: List[DeliveryZone]
    rejected: Optional[ZoneRejection] = None

    @property
    def message(self) -> Optional[str]:
        return REJECTION_MESSAGES.get(self.rejected) if self.rejected else None


def _reject(current_zones: Sequence[DeliveryZone], reason: ZoneRejection) -> ZoneEditResult:
    return ZoneEditResult(zones=list(current_zones), rejected=reason)


def upsert_zone(
        current_zones: Sequence[DeliveryZone],
        proposed: DeliveryZone,
        known_locations: Optional[Sequence[str]] = None,
        max_zones: Optional[int] = None,
) -> ZoneEditResult:
    """
    Cria ou atualiza `proposed` (pelo id) na lista.

    Recusa sem alterar nada quando o nome está vazio, nenhuma cidade foi
    escolhida, alguma cidade não está em `known_locations` (se informado) ou
    a zona é nova e o plano já atingiu `max_zones`.
    """
    if not proposed.name.strip():
        return _reject(current_zones, ZoneRejection.EMPTY_NAME)

    if not proposed.cities:
        return _reject(current_zones, ZoneRejection.EMPTY_CITIES)

    if known_locations is not None and any(city not in known_locations for city in proposed.cities):
        return _reject(current_zones, ZoneRejection.UNKNOWN_CITY)

    is_new = all(zone.id != proposed.id for zone in current_zones)
    if is_new and max_zones is not None and len(current_zones) >= max_zones:
        return _reject(current_zones, ZoneRejection.ZONE_LIMIT_REACHED)

    claimed = set(proposed.cities)
    zones = []
    for zone in current_zones:
        if zone.id == proposed.id:
            zones.append(proposed.model_copy(deep=True))
        else:
            zones.append(zone.model_copy(
                update={"cities": [city for city in zone.cities if city not in claimed]}
            ))

    if is_new:
        zones.append(proposed.model_copy(deep=True))

    return ZoneEditResult(zones=zones)


def delete_zone(current_zones: Sequence[DeliveryZone], zone_id: str) -> List[DeliveryZone]:
    """Remove a zona; as cidades dela ficam sem zona"""
    return [zone for zone in current_zones if zone.id != zone_id]


def toggle_zone(current_zones: Sequence[DeliveryZone], zone_id: str) -> List[DeliveryZone]:
    """Liga/desliga a zona para os clientes; as cidades continuam nela"""
    return [
        zone.model_copy(update={"enabled": not zone.enabled}) if zone.id == zone_id else zone
        for zone in current_zones
    ]
