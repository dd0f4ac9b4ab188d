from typing import Annotated

from fastapi import Depends, HTTPException

from storebuilder.core import models
from storebuilder.core.database import GetDBDep


# ═══════════════════════════════════════════════════════════
# ✅ GetStore
# ═══════════════════════════════════════════════════════════

def get_store(db: GetDBDep, store_id: int) -> models.Store:
    """
    Carrega a loja do path.

    A autenticação do lojista é feita pelo provedor de identidade antes de
    chegar aqui; esta dependência só garante que a loja existe.
    """
    store = db.get(models.Store, store_id)

    if not store:
        raise HTTPException(
            status_code=404,
            detail={
                'message': 'Store not found',
                'code': 'STORE_NOT_FOUND'
            }
        )

    return store


def get_public_store(store: Annotated[models.Store, Depends(get_store)]) -> models.Store:
    """Mesma validação, mas lojas desativadas não aparecem para clientes"""
    if not store.is_active:
        raise HTTPException(
            status_code=404,
            detail={
                'message': 'Store not found',
                'code': 'STORE_NOT_FOUND'
            }
        )

    return store


GetStoreDep = Annotated[models.Store, Depends(get_store)]
GetPublicStoreDep = Annotated[models.Store, Depends(get_public_store)]
