"""
Transfer component - Blog export, import and statistics.
"""

from .component import (
    EXPORT_VERSION,
    export_blog_data,
    export_blog_json,
    get_blog_stats,
    import_blog_data,
    parse_import,
    validate_import,
)
from .models import (
    BlogExport,
    BlogStats,
    ExportTables,
    ImportResult,
    ImportValidation,
    LoadCounts,
)
from .ports import BlogDataStorePort, TimePort

__all__ = [
    # Entry points
    "EXPORT_VERSION",
    "export_blog_data",
    "export_blog_json",
    "get_blog_stats",
    "import_blog_data",
    "parse_import",
    "validate_import",
    # Models
    "BlogExport",
    "BlogStats",
    "ExportTables",
    "ImportResult",
    "ImportValidation",
    "LoadCounts",
    # Ports
    "BlogDataStorePort",
    "TimePort",
]
