# storebuilder/api/admin/services/delivery_zone_migration.py
"""
Migração de Taxas de Entrega
============================

Lojas antigas guardam `stores.delivery_fees` em um de três formatos, sem
nenhuma marca de versão:

1. Normalizado:  { "zones": [...], "isFreeDelivery": false }
2. Detalhado:    { "بغداد": { "fee": 5000, "enabled": true }, ... }
3. Duas faixas:  { "baghdad": 5000, "provinces": 8000 }

O formato é identificado pela estrutura (chave `zones`, quantidade e nome das
chaves), nessa ordem de prioridade, e só depois convertido para a lista de
zonas. Nada aqui acessa o banco.
"""

import logging
import math
from typing import Callable, Literal, Sequence, Union

from pydantic import BaseModel, ValidationError

from storebuilder.api.schemas.store.delivery.delivery_zone import (
    DeliveryConfiguration,
    DeliveryZone,
    new_zone_id,
)
from storebuilder.core.defaults.delivery_locations import (
    FREE_DELIVERY_KEY,
    IRAQ_CITIES,
    LEGACY_PRIMARY_KEY,
    LEGACY_SECONDARY_KEY,
    PRIMARY_CITY,
    PRIMARY_ZONE_NAME,
    SECONDARY_ZONE_NAME,
    ZONES_KEY,
    default_delivery_fees,
    fee_group_name,
)
from storebuilder.core.utils.enums import LegacyShapeKind

logger = logging.getLogger(__name__)

Fee = Union[int, float]


# ═══════════════════════════════════════════════════════════
# FORMATOS
# ═══════════════════════════════════════════════════════════

class NormalizedShape(BaseModel):
    kind: Literal[LegacyShapeKind.NORMALIZED] = LegacyShapeKind.NORMALIZED
    zones: list[DeliveryZone]
    is_free_delivery: bool = False


class DetailedEntry(BaseModel):
    fee: Fee
    enabled: bool


class DetailedShape(BaseModel):
    kind: Literal[LegacyShapeKind.DETAILED] = LegacyShapeKind.DETAILED
    entries: dict[str, DetailedEntry]
    is_free_delivery: bool = False


class TwoTierShape(BaseModel):
    kind: Literal[LegacyShapeKind.TWO_TIER] = LegacyShapeKind.TWO_TIER
    primary_fee: Fee = default_delivery_fees["primary_fee"]
    secondary_fee: Fee = default_delivery_fees["secondary_fee"]
    is_free_delivery: bool = False


LegacyShape = Union[NormalizedShape, DetailedShape, TwoTierShape]


# ═══════════════════════════════════════════════════════════
# DETECÇÃO
# ═══════════════════════════════════════════════════════════

def _as_fee(value) -> Fee | None:
    """Converte um valor cru em taxa; None se não for numérico ou for negativo"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        fee = value
    elif isinstance(value, str):
        try:
            fee = float(value)
        except ValueError:
            return None
        if fee.is_integer():
            fee = int(fee)
    else:
        return None

    if not math.isfinite(fee) or fee < 0:
        return None
    return fee


def _parse_zones(raw_zones: list) -> list[DeliveryZone]:
    zones = []
    for index, raw_zone in enumerate(raw_zones):
        try:
            zone = DeliveryZone.model_validate(raw_zone)
        except ValidationError as e:
            logger.warning(f"⚠️ Zona #{index} inválida ignorada: {e.errors()}")
            continue

        if isinstance(raw_zone, dict) and len(zone.cities) != len(raw_zone.get("cities") or []):
            logger.warning(f"⚠️ Cidades repetidas na zona '{zone.id}' foram unificadas")
        zones.append(zone)
    return zones


def _parse_detailed_entries(raw: dict, location_keys: list[str]) -> dict[str, DetailedEntry]:
    entries = {}
    for city in location_keys:
        value = raw[city]
        if not isinstance(value, dict):
            logger.warning(f"⚠️ Entrada de '{city}' não é um objeto, ignorada")
            continue

        fee = _as_fee(value.get("fee"))
        if fee is None:
            logger.warning(f"⚠️ Taxa inválida para '{city}': {value.get('fee')!r}, ignorada")
            continue

        entries[city] = DetailedEntry(fee=fee, enabled=bool(value.get("enabled")))
    return entries


def parse_legacy_shape(raw) -> LegacyShape:
    """
    Identifica o formato de `delivery_fees`.

    Nunca falha: qualquer valor que não se encaixe claramente nos formatos
    normalizado ou detalhado cai no formato de duas faixas com as taxas padrão.
    """
    is_mapping = isinstance(raw, dict)
    is_free_delivery = is_mapping and raw.get(FREE_DELIVERY_KEY) is True

    # 1. Já normalizado
    if is_mapping and isinstance(raw.get(ZONES_KEY), list):
        return NormalizedShape(
            zones=_parse_zones(raw[ZONES_KEY]),
            is_free_delivery=is_free_delivery,
        )

    # 2. Detalhado por cidade
    location_keys = [key for key in raw if key != FREE_DELIVERY_KEY] if is_mapping else []
    if is_mapping and LEGACY_PRIMARY_KEY not in raw and len(location_keys) > 2:
        return DetailedShape(
            entries=_parse_detailed_entries(raw, location_keys),
            is_free_delivery=is_free_delivery,
        )

    # 3. Duas faixas (também cobre None e valores ambíguos)
    legacy_keys = {LEGACY_PRIMARY_KEY, LEGACY_SECONDARY_KEY}
    if raw is not None and not (is_mapping and set(location_keys) <= legacy_keys):
        logger.warning(
            f"⚠️ Formato de delivery_fees não reconhecido ({type(raw).__name__}), "
            f"usando taxas padrão"
        )

    primary_fee = _as_fee(raw.get(LEGACY_PRIMARY_KEY)) if is_mapping else None
    secondary_fee = _as_fee(raw.get(LEGACY_SECONDARY_KEY)) if is_mapping else None

    return TwoTierShape(
        primary_fee=default_delivery_fees["primary_fee"] if primary_fee is None else primary_fee,
        secondary_fee=default_delivery_fees["secondary_fee"] if secondary_fee is None else secondary_fee,
        is_free_delivery=is_free_delivery,
    )


# ═══════════════════════════════════════════════════════════
# MIGRAÇÃO
# ═══════════════════════════════════════════════════════════

def _fallback_zone(id_factory: Callable[[], str]) -> DeliveryZone:
    return DeliveryZone(
        id=id_factory(),
        name=PRIMARY_ZONE_NAME,
        fee=default_delivery_fees["primary_fee"],
        enabled=True,
        cities=[PRIMARY_CITY],
    )


def _migrate_detailed(
        shape: DetailedShape,
        known_locations: Sequence[str],
        id_factory: Callable[[], str],
) -> list[DeliveryZone]:
    # Agrupa as cidades ativas pela taxa; cidades desativadas ficam sem zona
    groups: dict[float, list[str]] = {}
    fees: dict[float, Fee] = {}
    for city, entry in shape.entries.items():
        if city not in known_locations:
            logger.warning(f"⚠️ Cidade desconhecida '{city}' no formato detalhado, ignorada")
            continue
        if not entry.enabled:
            continue
        groups.setdefault(float(entry.fee), []).append(city)
        fees.setdefault(float(entry.fee), entry.fee)

    zones = [
        DeliveryZone(
            id=id_factory(),
            name=fee_group_name(fees[key]),
            fee=fees[key],
            enabled=True,
            cities=groups[key],
        )
        for key in sorted(groups)
    ]

    if not zones:
        logger.info("ℹ️ Nenhuma cidade ativa no formato detalhado, criando zona padrão")
        zones.append(_fallback_zone(id_factory))

    return zones


def _migrate_two_tier(
        shape: TwoTierShape,
        known_locations: Sequence[str],
        id_factory: Callable[[], str],
) -> list[DeliveryZone]:
    return [
        DeliveryZone(
            id=id_factory(),
            name=PRIMARY_ZONE_NAME,
            fee=shape.primary_fee,
            enabled=True,
            cities=[PRIMARY_CITY],
        ),
        DeliveryZone(
            id=id_factory(),
            name=SECONDARY_ZONE_NAME,
            fee=shape.secondary_fee,
            enabled=True,
            cities=[city for city in known_locations if city != PRIMARY_CITY],
        ),
    ]


def migrate_legacy_shape(
        shape: LegacyShape,
        known_locations: Sequence[str] = IRAQ_CITIES,
        id_factory: Callable[[], str] = new_zone_id,
) -> list[DeliveryZone]:
    """Converte um formato identificado em lista de zonas. Zonas já normalizadas passam intactas."""
    if isinstance(shape, NormalizedShape):
        return list(shape.zones)

    if isinstance(shape, DetailedShape):
        zones = _migrate_detailed(shape, known_locations, id_factory)
    else:
        zones = _migrate_two_tier(shape, known_locations, id_factory)

    logger.info(f"🔄 delivery_fees migrado de '{shape.kind.value}' para {len(zones)} zona(s)")
    return zones


def configuration_from_shape(
        shape: LegacyShape,
        known_locations: Sequence[str] = IRAQ_CITIES,
        id_factory: Callable[[], str] = new_zone_id,
) -> DeliveryConfiguration:
    return DeliveryConfiguration(
        zones=migrate_legacy_shape(shape, known_locations, id_factory),
        is_free_delivery=shape.is_free_delivery,
    )


def load_and_normalize(
        raw,
        known_locations: Sequence[str] = IRAQ_CITIES,
        id_factory: Callable[[], str] = new_zone_id,
) -> DeliveryConfiguration:
    """Lê o valor cru de `delivery_fees` e devolve a configuração normalizada"""
    return configuration_from_shape(parse_legacy_shape(raw), known_locations, id_factory)
