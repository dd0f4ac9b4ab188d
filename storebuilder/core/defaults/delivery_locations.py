# storebuilder/core/defaults/delivery_locations.py

# Províncias atendidas pelo checkout da vitrine, na ordem de exibição
IRAQ_CITIES = [
    'بغداد', 'البصرة', 'الموصل', 'أربيل', 'السليمانية', 'دهوك',
    'كركوك', 'النجف', 'كربلاء', 'الحلة', 'الأنبار', 'الديوانية',
    'الكوت', 'العمارة', 'الناصرية', 'السماوة', 'ديالى', 'صلاح الدين',
]

PRIMARY_CITY = 'بغداد'

CURRENCY_LABEL = 'د.ع'

default_delivery_fees = {
    # Formato legado { baghdad: 5000, provinces: 8000 }
    "primary_fee": 5000,
    "secondary_fee": 8000,

    # Taxa sugerida ao criar uma zona nova no editor
    "new_zone_fee": 5000,
}

# Chaves do formato legado de duas faixas
LEGACY_PRIMARY_KEY = "baghdad"
LEGACY_SECONDARY_KEY = "provinces"

# Chaves do registro normalizado
ZONES_KEY = "zones"
FREE_DELIVERY_KEY = "isFreeDelivery"

PRIMARY_ZONE_NAME = 'توصيل بغداد'
SECONDARY_ZONE_NAME = 'باقي المحافظات'


def fee_group_name(fee: float) -> str:
    """Nome gerado para uma zona agrupada por taxa, ex.: 'مجموعة 5000 د.ع'"""
    amount = int(fee) if float(fee).is_integer() else fee
    return f'مجموعة {amount} {CURRENCY_LABEL}'
