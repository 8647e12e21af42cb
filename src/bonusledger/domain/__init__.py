"""Domain layer for bonusledger application."""

# Services are imported lazily: the database layer imports domain.entities,
# and the services import the database layer.
_SERVICES = {
    "ClientService": "bonusledger.domain.client",
    "PurchaseService": "bonusledger.domain.purchase",
    "RefundService": "bonusledger.domain.refund",
    "SalesService": "bonusledger.domain.sales",
    "VinService": "bonusledger.domain.vin",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
