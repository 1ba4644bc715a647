from pos_api.routers.categories import router as categories_router
from pos_api.routers.checkout import router as checkout_router
from pos_api.routers.health import router as health_router
from pos_api.routers.products import router as products_router
from pos_api.routers.reports import router as reports_router

__all__ = [
    "categories_router",
    "checkout_router",
    "health_router",
    "products_router",
    "reports_router",
]
