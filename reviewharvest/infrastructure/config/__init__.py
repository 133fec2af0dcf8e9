from .settings import (
    Settings,
    BrowserSettings,
    ScrapeSettings,
    SelectorSettings,
    SourceSettings,
    ExportSettings,
    MAX_CONCURRENCY,
    get_settings,
)
