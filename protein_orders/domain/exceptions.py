class DomainException(Exception):
    code = "domain_error"


class InvalidOrderError(DomainException):
    code = "validation_error"


class NotFoundError(DomainException):
    code = "not_found"


class ProductNotFoundError(NotFoundError):
    code = "product_not_found"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"No product found with ID {product_id}")


class OrderNotFoundError(NotFoundError):
    code = "order_not_found"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"No order found with ID {order_id}")


class RecordNotFoundError(NotFoundError):
    """Запись с таким ключом отсутствует в коллекции"""

    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"No record {key!r} in collection {collection!r}")


class StoreUnavailableError(DomainException):
    code = "store_unavailable"


class CatalogUnavailableError(StoreUnavailableError):
    code = "catalog_unavailable"
