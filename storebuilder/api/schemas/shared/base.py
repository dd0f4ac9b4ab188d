# storebuilder/api/schemas/shared/base.py

from pydantic import BaseModel, ConfigDict


class AppBaseModel(BaseModel):
    """
    Base dos schemas da API.

    - from_attributes: permite validar direto a partir dos modelos do ORM
    - populate_by_name: aceita tanto o nome do campo quanto o alias
      (o registro salvo usa camelCase, ex.: isFreeDelivery)
    - extra='ignore': campos desconhecidos do registro JSON são descartados
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        extra='ignore'
    )
