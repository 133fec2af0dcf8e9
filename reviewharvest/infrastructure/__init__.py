# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - browser/: PageDriver interface and Selenium Chrome implementation
# - importer/: Excel/CSV catalog loading (pandas)
# - export/: CSV review, mismatch and status files
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
