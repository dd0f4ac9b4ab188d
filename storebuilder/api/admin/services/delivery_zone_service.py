# storebuilder/api/admin/services/delivery_zone_service.py
import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storebuilder.api.admin.services.delivery_coverage import available_destinations, quote_delivery_fee
from storebuilder.api.admin.services.delivery_errors import DeliveryStorageError, StoreNotFoundError
from storebuilder.api.admin.services.delivery_zone_migration import configuration_from_shape, parse_legacy_shape
from storebuilder.api.schemas.store.delivery.delivery_zone import DeliveryConfiguration, DeliveryDestination
from storebuilder.core import models
from storebuilder.core.defaults.delivery_locations import IRAQ_CITIES
from storebuilder.core.utils.enums import LegacyShapeKind

logger = logging.getLogger(__name__)


class DeliveryZoneService:
    """Leitura e gravação da configuração de entrega de uma loja"""

    def __init__(self, db: Session, known_locations: Sequence[str] = IRAQ_CITIES):
        self.db = db
        self.known_locations = known_locations

    def _get_store(self, store_id: int) -> models.Store:
        try:
            store = self.db.get(models.Store, store_id)
        except SQLAlchemyError as e:
            logger.error(f"❌ Erro ao buscar loja {store_id}: {e}", exc_info=True)
            raise DeliveryStorageError(f"Falha ao ler a loja {store_id}") from e

        if not store:
            raise StoreNotFoundError(store_id)
        return store

    # ========== LEITURA ==========

    def read_raw(self, store_id: int):
        """Valor cru de `delivery_fees` (pode ser None ou um formato legado)"""
        return self._get_store(store_id).delivery_fees

    def load_with_source(self, store_id: int) -> tuple[DeliveryConfiguration, LegacyShapeKind]:
        """
        Carrega a configuração normalizada e informa de qual formato ela veio.

        Não grava nada: a migração só é persistida quando o lojista salvar.
        """
        shape = parse_legacy_shape(self.read_raw(store_id))
        return configuration_from_shape(shape, self.known_locations), shape.kind

    def load(self, store_id: int) -> DeliveryConfiguration:
        configuration, _ = self.load_with_source(store_id)
        return configuration

    def get_zone_limit(self, store_id: int) -> Optional[int]:
        """Máximo de zonas permitido pelo plano da loja (None = ilimitado)"""
        store = self._get_store(store_id)
        return store.plan.max_delivery_zones if store.plan else None

    # ========== GRAVAÇÃO ==========

    def save(self, store_id: int, configuration: DeliveryConfiguration) -> DeliveryConfiguration:
        """
        Substitui o registro inteiro de `delivery_fees`.

        Não há controle de concorrência: a última gravação vence.

        Raises:
            DeliveryStorageError: falha no banco (após rollback)
        """
        store = self._get_store(store_id)
        store.delivery_fees = configuration.to_record()

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Falha ao salvar entrega da loja {store_id}: {e}", exc_info=True)
            raise DeliveryStorageError(f"Falha ao salvar as zonas de entrega da loja {store_id}") from e

        logger.info(
            f"✅ Entrega da loja {store_id} salva: {len(configuration.zones)} zona(s), "
            f"frete grátis={configuration.is_free_delivery}"
        )
        return configuration

    # ========== VITRINE ==========

    def list_destinations(self, store_id: int) -> tuple[DeliveryConfiguration, List[DeliveryDestination]]:
        configuration = self.load(store_id)
        return configuration, available_destinations(configuration, self.known_locations)

    def quote(self, store_id: int, city: str) -> tuple[DeliveryConfiguration, DeliveryDestination]:
        configuration = self.load(store_id)
        return configuration, quote_delivery_fee(configuration, city)
