import logging
from typing import List

from protein_orders.domain.models import Product
from protein_orders.domain.exceptions import CatalogUnavailableError, StoreUnavailableError
from protein_orders.application.interfaces import ProductRepository

logger = logging.getLogger(__name__)


class ListProductsUseCase:
    def __init__(self, products: ProductRepository):
        self._products = products

    async def __call__(self) -> List[Product]:
        try:
            products = await self._products.list_in_stock()
        except StoreUnavailableError as e:
            logger.error(f"Каталог недоступен: {e}")
            raise CatalogUnavailableError(str(e)) from e
        logger.info(f"В наличии товаров: {len(products)}")
        return products
