from hcl_catalog.services.catalog import ProductCatalog
from hcl_catalog.services.exporter import GroupExporter
from hcl_catalog.services.groups import GroupStore
from hcl_catalog.services.loader import load_catalog

__all__ = [
    "GroupExporter",
    "GroupStore",
    "ProductCatalog",
    "load_catalog",
]
