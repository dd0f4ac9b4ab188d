class DeliveryZoneError(Exception):
    """Exceção base para erros de entrega"""
    pass


class StoreNotFoundError(DeliveryZoneError):
    """A loja informada não existe"""

    def __init__(self, store_id: int):
        self.store_id = store_id
        super().__init__(f"Loja {store_id} não encontrada")


class DeliveryStorageError(DeliveryZoneError):
    """Falha ao ler ou gravar `stores.delivery_fees`. O estado do editor é preservado."""
    pass


class DestinationUnavailableError(DeliveryZoneError):
    """A cidade não pertence a nenhuma zona ativa"""

    def __init__(self, city: str):
        self.city = city
        super().__init__(f"Entrega indisponível para '{city}'")
