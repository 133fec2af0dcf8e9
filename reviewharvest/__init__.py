# Review Harvest - Storefront Review Migration Tool
# =================================================
# Finds catalog products on a source storefront, collects their customer
# reviews and exports them in a fixed schema for bulk import.
#
# ARCHITECTURE LAYERS:
# - Presentation:   CLI entry point (user interaction)
# - Application:    Pagination, extraction and the per-product pipeline
# - Domain:         Pure business logic (matching, normalization, dedup)
# - Infrastructure: External services (browser, catalog files, CSV export)
#
# The browser sits behind the PageDriver interface, so the domain and
# application layers never touch Selenium or page markup directly.

__version__ = "1.0.0"
