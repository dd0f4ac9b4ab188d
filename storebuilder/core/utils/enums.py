import enum


class LegacyShapeKind(str, enum.Enum):
    """Formatos conhecidos de `stores.delivery_fees`"""
    NORMALIZED = "normalized"  # { zones: [...], isFreeDelivery }
    DETAILED = "detailed"      # { "<cidade>": { fee, enabled }, ... }
    TWO_TIER = "two_tier"      # { baghdad: 5000, provinces: 8000 }


class ZoneRejection(str, enum.Enum):
    """Motivos para o editor recusar uma zona. Mantenha sincronizado com o frontend."""
    EMPTY_NAME = "EMPTY_NAME"
    EMPTY_CITIES = "EMPTY_CITIES"
    UNKNOWN_CITY = "UNKNOWN_CITY"
    ZONE_LIMIT_REACHED = "ZONE_LIMIT_REACHED"
