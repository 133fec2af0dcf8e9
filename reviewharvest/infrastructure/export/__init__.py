from .csv_exporter import CsvExporter, STATUS_COLUMNS, CATALOG_COLUMNS
