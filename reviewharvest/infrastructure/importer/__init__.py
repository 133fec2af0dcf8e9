from .catalog_loader import CatalogLoader, entries_from_names, NAME_PATTERNS, HANDLE_PATTERNS
