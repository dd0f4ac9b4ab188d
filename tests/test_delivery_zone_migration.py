"""
Testes da Migração de Taxas de Entrega
======================================
Detecção de formato e conversão para zonas
"""

import itertools

import pytest

from storebuilder.api.admin.services.delivery_zone_migration import (
    DetailedShape,
    NormalizedShape,
    TwoTierShape,
    load_and_normalize,
    migrate_legacy_shape,
    parse_legacy_shape,
)
from storebuilder.core.defaults.delivery_locations import IRAQ_CITIES, PRIMARY_CITY
from storebuilder.core.utils.enums import LegacyShapeKind

LETTERS = ["A", "B", "C", "D"]


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"z{next(counter)}"


@pytest.fixture
def normalized_record():
    return {
        "zones": [
            {"id": "a1", "name": "بغداد", "fee": 4000, "enabled": True, "cities": ["بغداد"]},
            {"id": "b2", "name": "الجنوب", "fee": 7000, "enabled": False, "cities": ["البصرة", "الناصرية"]},
        ],
        "isFreeDelivery": True,
    }


# ═══════════════════════════════════════════════════════════
# DETECÇÃO
# ═══════════════════════════════════════════════════════════

class TestParseLegacyShape:

    def test_zones_array_is_normalized(self, normalized_record):
        shape = parse_legacy_shape(normalized_record)

        assert isinstance(shape, NormalizedShape)
        assert shape.kind == LegacyShapeKind.NORMALIZED
        assert shape.is_free_delivery is True
        assert [zone.id for zone in shape.zones] == ["a1", "b2"]

    def test_more_than_two_city_keys_is_detailed(self):
        raw = {
            "بغداد": {"fee": 5000, "enabled": True},
            "البصرة": {"fee": 8000, "enabled": True},
            "أربيل": {"fee": 8000, "enabled": False},
        }

        shape = parse_legacy_shape(raw)

        assert isinstance(shape, DetailedShape)
        assert set(shape.entries) == {"بغداد", "البصرة", "أربيل"}
        assert shape.entries["أربيل"].enabled is False

    @pytest.mark.parametrize("raw", [None, {}, {"baghdad": 5000, "provinces": 8000}, 7000, "texto"])
    def test_everything_else_is_two_tier(self, raw):
        assert isinstance(parse_legacy_shape(raw), TwoTierShape)

    def test_two_city_keys_are_not_enough_for_detailed(self):
        raw = {
            "بغداد": {"fee": 5000, "enabled": True},
            "البصرة": {"fee": 8000, "enabled": True},
        }

        shape = parse_legacy_shape(raw)

        assert isinstance(shape, TwoTierShape)
        assert shape.primary_fee == 5000
        assert shape.secondary_fee == 8000

    def test_legacy_key_wins_over_key_count(self):
        raw = {"baghdad": 3000, "provinces": 6000, "extra": 1, "outra": 2}

        shape = parse_legacy_shape(raw)

        assert isinstance(shape, TwoTierShape)
        assert shape.primary_fee == 3000
        assert shape.secondary_fee == 6000

    def test_free_delivery_flag_is_not_counted_as_city(self):
        raw = {
            "بغداد": {"fee": 5000, "enabled": True},
            "البصرة": {"fee": 8000, "enabled": True},
            "isFreeDelivery": True,
        }

        shape = parse_legacy_shape(raw)

        assert isinstance(shape, TwoTierShape)
        assert shape.is_free_delivery is True

    def test_non_numeric_legacy_fees_fall_back_to_defaults(self):
        shape = parse_legacy_shape({"baghdad": "abc", "provinces": None})

        assert shape.primary_fee == 5000
        assert shape.secondary_fee == 8000

    def test_malformed_detailed_entries_are_skipped(self):
        raw = {
            "بغداد": {"fee": 5000, "enabled": True},
            "البصرة": "8000",
            "أربيل": {"fee": "caro", "enabled": True},
            "دهوك": {"fee": "6000", "enabled": True},
        }

        shape = parse_legacy_shape(raw)

        assert set(shape.entries) == {"بغداد", "دهوك"}
        assert shape.entries["دهوك"].fee == 6000

    def test_malformed_normalized_zones_are_skipped(self):
        raw = {"zones": [{"id": "ok", "name": "x", "fee": 1, "cities": []}, {"name": "sem id"}]}

        shape = parse_legacy_shape(raw)

        assert [zone.id for zone in shape.zones] == ["ok"]


# ═══════════════════════════════════════════════════════════
# MIGRAÇÃO
# ═══════════════════════════════════════════════════════════

class TestMigrateLegacyShape:

    def test_detailed_groups_enabled_cities_by_fee(self, id_factory):
        raw = {
            "A": {"fee": 1000, "enabled": True},
            "B": {"fee": 1000, "enabled": True},
            "C": {"fee": 2000, "enabled": True},
            "D": {"fee": 500, "enabled": False},
        }

        zones = migrate_legacy_shape(parse_legacy_shape(raw), LETTERS, id_factory)

        assert len(zones) == 2
        assert zones[0].fee == 1000 and zones[0].cities == ["A", "B"]
        assert zones[1].fee == 2000 and zones[1].cities == ["C"]
        assert all(zone.enabled for zone in zones)
        assert "D" not in {city for zone in zones for city in zone.cities}

    def test_detailed_zone_names_carry_the_fee(self, id_factory):
        raw = {
            "A": {"fee": 1000, "enabled": True},
            "B": {"fee": 2500, "enabled": True},
            "C": {"fee": 2500, "enabled": True},
        }

        zones = migrate_legacy_shape(parse_legacy_shape(raw), LETTERS, id_factory)

        assert zones[0].name == "مجموعة 1000 د.ع"
        assert zones[1].name == "مجموعة 2500 د.ع"

    def test_all_disabled_detailed_falls_back_to_primary_zone(self, id_factory):
        raw = {
            "A": {"fee": 1000, "enabled": False},
            "B": {"fee": 1000, "enabled": False},
            "C": {"fee": 2000, "enabled": False},
        }

        zones = migrate_legacy_shape(parse_legacy_shape(raw), LETTERS, id_factory)

        assert len(zones) == 1
        assert zones[0].cities == [PRIMARY_CITY]
        assert zones[0].fee == 5000
        assert zones[0].enabled is True

    def test_two_tier_builds_primary_and_rest_of_region(self, id_factory):
        zones = migrate_legacy_shape(
            parse_legacy_shape({"baghdad": 5000, "provinces": 8000}),
            id_factory=id_factory,
        )

        assert len(zones) == 2
        primary, rest = zones
        assert primary.cities == [PRIMARY_CITY]
        assert primary.fee == 5000
        assert rest.fee == 8000
        assert rest.cities == [city for city in IRAQ_CITIES if city != PRIMARY_CITY]

    def test_absent_value_uses_documented_defaults(self, id_factory):
        zones = migrate_legacy_shape(parse_legacy_shape(None), id_factory=id_factory)

        assert [zone.fee for zone in zones] == [5000, 8000]
        assert sorted(city for zone in zones for city in zone.cities) == sorted(IRAQ_CITIES)

    def test_generated_ids_are_unique(self):
        raw = {str(i): {"fee": i * 100, "enabled": True} for i in range(1, 8)}

        zones = migrate_legacy_shape(parse_legacy_shape(raw), list(raw))

        assert len({zone.id for zone in zones}) == len(zones) == 7

    def test_detailed_unknown_cities_are_dropped(self, id_factory, caplog):
        raw = {
            "Baghdad": {"fee": 5000, "enabled": True},
            "البصرة": {"fee": 8000, "enabled": True},
            "أربيل": {"fee": 8000, "enabled": True},
        }

        zones = migrate_legacy_shape(parse_legacy_shape(raw), id_factory=id_factory)

        assert [zone.cities for zone in zones] == [["البصرة", "أربيل"]]
        assert "Baghdad" in caplog.text

    def test_detailed_with_only_unknown_cities_falls_back(self, id_factory):
        raw = {name: {"fee": 1000, "enabled": True} for name in ("X", "Y", "Z")}

        zones = migrate_legacy_shape(parse_legacy_shape(raw), id_factory=id_factory)

        assert [zone.cities for zone in zones] == [[PRIMARY_CITY]]


class TestLoadAndNormalize:

    def test_normalized_record_passes_through_unchanged(self, normalized_record, id_factory):
        configuration = load_and_normalize(normalized_record, id_factory=id_factory)

        assert configuration.to_record() == normalized_record

    def test_numeric_ids_from_old_records_become_strings(self):
        raw = {"zones": [{"id": 1712345678901, "name": "x", "fee": 0, "enabled": True, "cities": ["بغداد"]}]}

        configuration = load_and_normalize(raw)

        assert configuration.zones[0].id == "1712345678901"

    def test_legacy_record_is_not_free_delivery_by_default(self, id_factory):
        configuration = load_and_normalize({"baghdad": 5000, "provinces": 8000}, id_factory=id_factory)

        assert configuration.is_free_delivery is False
        assert [zone.id for zone in configuration.zones] == ["z1", "z2"]

    def test_repeated_cities_are_merged_with_warning(self, caplog):
        raw = {"zones": [{"id": "a1", "name": "x", "fee": 1, "enabled": True, "cities": ["بغداد", "بغداد"]}]}

        configuration = load_and_normalize(raw)

        assert configuration.zones[0].cities == ["بغداد"]
        assert "a1" in caplog.text
