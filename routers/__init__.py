from . import analytics, categories, displays, media, orders, products, public, sell, shipping, slider

ROUTERS = [
    sell.router,
    analytics.router,
    categories.router,
    displays.router,
    shipping.router,
    slider.router,
    products.router,
    orders.router,
    public.router,
    media.router,
]

__all__ = ["ROUTERS"]
