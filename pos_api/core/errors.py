class PosError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PosError):
    status_code = 400


class NotFoundError(PosError):
    status_code = 404


class ConflictError(PosError):
    status_code = 409


class CheckoutValidationError(ValidationError):
    pass


class CatalogValidationError(ValidationError):
    pass


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__("product id {} not found".format(product_id))
        self.product_id = product_id


class CategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: int):
        super().__init__("category id {} not found".format(category_id))
        self.category_id = category_id


class TransactionNotFoundError(NotFoundError):
    def __init__(self, transaction_id: int):
        super().__init__("transaction id {} not found".format(transaction_id))
        self.transaction_id = transaction_id


class InsufficientStockError(ConflictError):
    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__("stock not enough for product {}".format(product_id))
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ProductInUseError(ConflictError):
    def __init__(self, product_id: int):
        super().__init__(
            "product id {} has transaction history and cannot be deleted".format(product_id)
        )
        self.product_id = product_id


__all__ = [
    "CatalogValidationError",
    "CategoryNotFoundError",
    "CheckoutValidationError",
    "ConflictError",
    "InsufficientStockError",
    "NotFoundError",
    "PosError",
    "ProductInUseError",
    "ProductNotFoundError",
    "TransactionNotFoundError",
    "ValidationError",
]
