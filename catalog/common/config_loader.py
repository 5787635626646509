"""
Configuration Loader

YAML settings for the importer (batching, spreadsheet column aliases) and
for the image and specification lookups.
"""

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

CONFIG_DIR_ENV = 'CATALOG_CONFIG_DIR'


def _config_dir_candidates() -> List[Path]:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return [Path(override)]
    # Project checkout first, then wherever the scripts are run from
    return [Path(__file__).resolve().parents[2] / 'config', Path.cwd() / 'config']


def config_path(filename: str) -> Path:
    """
    Locate a config file.

    ``$CATALOG_CONFIG_DIR`` is used exclusively when set; otherwise the
    ``config/`` directory beside the package, then the one in the
    working directory.

    Raises:
        FileNotFoundError: If no candidate directory holds the file
    """
    candidates = [directory / filename for directory in _config_dir_candidates()]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    tried = ', '.join(str(c) for c in candidates)
    raise FileNotFoundError(f"Config file {filename} not found. Tried: {tried}")


def load_config(filename: str) -> Dict[str, Any]:
    """Parse a YAML config file; an empty file gives an empty dict."""
    with open(config_path(filename), 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_import_settings() -> Dict[str, Any]:
    """batch_size, batch_delay, test_mode_limit, column_aliases, extra_aliases."""
    return load_config('import_settings.yaml')


def load_image_sources() -> Dict[str, Any]:
    """
    Image lookup settings.

    Keys: placeholder, timeout, image_domains, image_extensions,
    product_images, apple_cdn_template, oem, search_url_template.
    """
    return load_config('image_sources.yaml')


def load_spec_sources() -> Dict[str, Any]:
    """min_confidence, timeout, queries and the per-site source definitions."""
    return load_config('spec_sources.yaml')


def build_alias_lookup(aliases: Dict[str, List[str]]) -> Dict[str, str]:
    """
    Invert ``field -> [header, ...]`` into ``lowercase header -> field``.

    When two fields list the same header, the first one keeps it.
    """
    lookup: Dict[str, str] = {}
    for field_name, headers in aliases.items():
        for header in headers:
            lookup.setdefault(str(header).strip().lower(), field_name)
    return lookup
