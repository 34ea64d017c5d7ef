from application.catalog.catalog_mirror import CatalogMirror

__all__ = ["CatalogMirror"]
