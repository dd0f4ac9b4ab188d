import uuid
from typing import List, Optional, Union

from pydantic import Field, field_validator, model_validator

from storebuilder.api.schemas.shared.base import AppBaseModel
from storebuilder.core.defaults.delivery_locations import IRAQ_CITIES, default_delivery_fees
from storebuilder.core.utils.enums import LegacyShapeKind, ZoneRejection


def new_zone_id() -> str:
    return uuid.uuid4().hex


class DeliveryZone(AppBaseModel):
    """Grupo de cidades que compartilham a mesma taxa de entrega"""
    id: str
    name: str
    fee: Union[int, float] = 0
    enabled: bool = True
    cities: List[str] = []

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        # Registros antigos guardavam ids numéricos (timestamp)
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("fee")
    @classmethod
    def fee_must_not_be_negative(cls, value):
        if value < 0:
            raise ValueError("A taxa de entrega não pode ser negativa")
        return value

    @field_validator("cities")
    @classmethod
    def dedupe_cities(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


def check_zone_list(zones: List[DeliveryZone]) -> None:
    """Ids únicos e nenhuma cidade em mais de uma zona"""
    seen_ids = set()
    owners: dict[str, str] = {}

    for zone in zones:
        if zone.id in seen_ids:
            raise ValueError(f"Zona duplicada: {zone.id}")
        seen_ids.add(zone.id)

        for city in zone.cities:
            if city in owners:
                raise ValueError(
                    f"'{city}' está em mais de uma zona ({owners[city]}, {zone.name})"
                )
            owners[city] = zone.name


class DeliveryConfiguration(AppBaseModel):
    """Registro salvo em `stores.delivery_fees`"""
    zones: List[DeliveryZone] = []
    is_free_delivery: bool = Field(default=False, alias="isFreeDelivery")

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class DeliveryConfigurationUpdate(DeliveryConfiguration):
    """Payload do botão salvar: o registro inteiro é substituído"""

    @model_validator(mode="after")
    def check_zones(self):
        for zone in self.zones:
            if not zone.name.strip():
                raise ValueError("Toda zona precisa de um nome")

            for city in zone.cities:
                if city not in IRAQ_CITIES:
                    raise ValueError(f"Cidade desconhecida: {city}")

        check_zone_list(self.zones)
        return self


class ZoneDraft(DeliveryZone):
    """Zona vinda do modal do editor; sem id quando é nova"""
    id: Optional[str] = None
    name: str = ""
    fee: Union[int, float] = default_delivery_fees["new_zone_fee"]

    def to_zone(self) -> DeliveryZone:
        return DeliveryZone(
            id=self.id or new_zone_id(),
            name=self.name,
            fee=self.fee,
            enabled=self.enabled,
            cities=self.cities,
        )


class ZoneListRequest(AppBaseModel):
    """Lista atual do editor; precisa respeitar as mesmas regras do registro salvo"""
    zones: List[DeliveryZone] = []

    @model_validator(mode="after")
    def check_zones(self):
        check_zone_list(self.zones)
        return self


class ZoneUpsertRequest(ZoneListRequest):
    zone: ZoneDraft


class ZoneEditResponse(AppBaseModel):
    zones: List[DeliveryZone]
    rejected: Optional[ZoneRejection] = None
    message: Optional[str] = None
    unassigned: List[str] = []


class DeliveryConfigurationOut(DeliveryConfiguration):
    unassigned: List[str] = []
    source_format: LegacyShapeKind = LegacyShapeKind.NORMALIZED
    zone_limit: Optional[int] = None


class DeliveryDestination(AppBaseModel):
    city: str
    fee: Union[int, float]
    zone_id: str


class DeliveryDestinationsOut(AppBaseModel):
    is_free_delivery: bool = Field(default=False, alias="isFreeDelivery")
    destinations: List[DeliveryDestination] = []


class DeliveryQuoteOut(DeliveryDestination):
    is_free_delivery: bool = Field(default=False, alias="isFreeDelivery")


class DeliveryLocationsOut(AppBaseModel):
    locations: List[str]
    primary_city: str
