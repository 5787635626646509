# Common utilities
from .config_loader import (
    build_alias_lookup,
    load_config,
    load_image_sources,
    load_import_settings,
    load_spec_sources,
)
from .csv_utils import iter_csv_records, write_csv
from .log_config import resolve_level, setup_logging
from .text_utils import normalize_whitespace, slugify, strip_punctuation
