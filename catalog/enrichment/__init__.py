"""
Best-effort product enrichment from external sources.

Modules:
    result - EnrichmentResult / EnrichmentFailure contract
    image_fetcher - ImageFetcher strategy chain
    spec_fetcher - SpecFetcher with confidence-ranked sources
    description - Description generation from specs
    catalog_enricher - Backfill images/specs for stored products
"""

from .catalog_enricher import CatalogEnricher, EnrichmentSummary
from .description import generate_description_from_specs
from .image_fetcher import ImageFetcher
from .result import EnrichmentFailure, EnrichmentResult, model_key
from .spec_fetcher import (
    LOOKUP_FIELDS,
    SpecFetcher,
    SpecSearchResult,
    SpecSource,
    extract_specs,
    merge_spec_results,
)

__all__ = [
    'EnrichmentResult',
    'EnrichmentFailure',
    'model_key',
    'ImageFetcher',
    'SpecFetcher',
    'SpecSource',
    'SpecSearchResult',
    'LOOKUP_FIELDS',
    'extract_specs',
    'merge_spec_results',
    'generate_description_from_specs',
    'CatalogEnricher',
    'EnrichmentSummary',
]
