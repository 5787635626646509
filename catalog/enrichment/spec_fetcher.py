"""
Specification Fetcher

Looks up technical specifications for a device on phone specification
sites. Each configured source is searched with a few query variants; rows
in the result page are matched against per-field labels. A source result
gets a confidence score and low-confidence results are discarded.

Results are merged into the product's existing specs, highest confidence
first, filling only attributes that are still missing.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from ..common.config_loader import load_spec_sources
from ..common.constants import USER_AGENT
from ..common.text_utils import normalize_whitespace
from ..models import ProductSpecs
from .result import EnrichmentResult, model_key

logger = logging.getLogger(__name__)

# Spec attributes that can be looked up online (condition attributes come from inventory)
LOOKUP_FIELDS = ('display', 'processor', 'memory', 'storage', 'camera', 'battery', 'os')

FIELD_CONFIDENCE = 0.1
DETAIL_PAGE_CONFIDENCE = 0.2
MAX_CONFIDENCE = 1.0

DEFAULT_QUERIES = [
    "{brand} {model} specifications",
    "{brand} {model} specs",
    "{brand} {model} technical specifications",
]

SOURCE_ERRORS = (requests.RequestException, ValueError, KeyError, TypeError, AttributeError)


@dataclass
class SpecSource:
    """A specification site and the selectors used to read it."""
    name: str
    base_url: str
    search_path: str
    row_selector: str
    value_selector: str
    labels: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_config(cls, data: Dict[str, Any]) -> SpecSource:
        return cls(
            name=data['name'],
            base_url=data['base_url'].rstrip('/'),
            search_path=data.get('search_path', '/search'),
            row_selector=data['row_selector'],
            value_selector=data['value_selector'],
            labels={k: list(v) for k, v in (data.get('labels') or {}).items()},
        )

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{self.search_path}"


@dataclass
class SpecSearchResult:
    """Specs found on one source, with a heuristic confidence score."""
    source: str
    specs: ProductSpecs
    confidence: float


def _label_pattern(label: str) -> re.Pattern:
    return re.compile(rf'\b{re.escape(label)}\b', re.IGNORECASE)


def extract_specs(soup: BeautifulSoup, source: SpecSource) -> ProductSpecs:
    """
    Read labelled spec rows from a parsed page.

    For each row matched by the source's row selector, the label part of
    the row (its text minus the value cell) is compared against each
    field's labels. The first row matching a field wins.

    Args:
        soup: Parsed page
        source: Source whose selectors and labels apply

    Returns:
        ProductSpecs with the fields found (possibly empty)
    """
    patterns = {
        field_name: [_label_pattern(label) for label in labels]
        for field_name, labels in source.labels.items()
        if field_name in LOOKUP_FIELDS
    }
    found: Dict[str, str] = {}

    for row in soup.select(source.row_selector):
        value_element = row.select_one(source.value_selector)
        if value_element is None:
            continue

        value = normalize_whitespace(value_element.get_text(" ", strip=True))
        if not value:
            continue

        row_text = normalize_whitespace(row.get_text(" ", strip=True))
        label_text = row_text.replace(value, "", 1)

        for field_name, field_patterns in patterns.items():
            if field_name in found:
                continue
            if any(p.search(label_text) for p in field_patterns):
                found[field_name] = value

    return ProductSpecs(**found)


def merge_spec_results(existing: ProductSpecs, results: List[SpecSearchResult]) -> ProductSpecs:
    """
    Merge source results into existing specs.

    Results are applied highest confidence first; present values are never
    overwritten, so earlier (more confident) sources win ties.
    """
    merged = existing
    for result in sorted(results, key=lambda r: r.confidence, reverse=True):
        merged = merged.merge_missing(result.specs)
    return merged


class SpecFetcher:
    """
    Best-effort specification lookup.

    Usage:
        with SpecFetcher() as fetcher:
            result = fetcher.fetch_specs("Samsung", "Galaxy S24", existing_specs)
            result.value  # merged ProductSpecs (existing values untouched)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            config: Spec source settings (if None, loads spec_sources.yaml)
            session: Shared HTTP session (a new one is created if None)
        """
        if config is None:
            config = load_spec_sources()

        self.min_confidence = float(config.get('min_confidence', 0.3))
        self.timeout = config.get('timeout', 10)
        self.queries = list(config.get('queries') or DEFAULT_QUERIES)
        self.sources = [SpecSource.from_config(s) for s in config.get('sources', [])]

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def fetch_specs(
        self,
        brand: str,
        model: str,
        existing: Optional[ProductSpecs] = None,
    ) -> EnrichmentResult[ProductSpecs]:
        """
        Fill missing lookup attributes of ``existing``. Never raises.

        Args:
            brand: Manufacturer name
            model: Model name
            existing: Specs already known (never overwritten)

        Returns:
            EnrichmentResult whose value is the merged specs; on total
            failure the value is ``existing`` unchanged and source is "existing"
        """
        existing = existing if existing is not None else ProductSpecs()
        result: EnrichmentResult[ProductSpecs] = EnrichmentResult(value=existing, source='existing')

        if not existing.missing_fields(LOOKUP_FIELDS):
            return result

        if not (brand or "").strip() or not (model or "").strip():
            result.fail('input', "brand and model are required")
            return result

        accepted: List[SpecSearchResult] = []
        for source in self.sources:
            try:
                found = self.search_source(source, brand, model)
            except SOURCE_ERRORS as e:
                logger.warning("Spec source %s failed for %s %s: %s", source.name, brand, model, e)
                result.fail(source.name, f"{type(e).__name__}: {str(e)[:100]}")
                continue

            if found is None:
                result.fail(source.name, "no specs found")
                continue

            if found.confidence < self.min_confidence:
                logger.debug("Discarding %s result for %s %s (confidence %.2f)",
                             source.name, brand, model, found.confidence)
                result.fail(source.name, f"confidence {found.confidence:.2f} below {self.min_confidence:.2f}")
                continue

            accepted.append(found)

        if not accepted:
            logger.info("No specs found for %s %s", brand, model)
            return result

        ranked = sorted(accepted, key=lambda r: r.confidence, reverse=True)
        result.value = merge_spec_results(existing, ranked)
        result.source = ",".join(r.source for r in ranked)
        return result

    def fetch_specs_batch(
        self,
        products: Iterable[Any],
        batch_size: int = 3,
        delay: float = 2.0,
        key: Callable[[Any], str] = model_key,
    ) -> Dict[str, ProductSpecs]:
        """
        Look up specs for several products, pausing between batches.

        Args:
            products: Objects with brand, model and specs
            batch_size: Products per batch
            delay: Seconds to sleep between batches
            key: Builds the result key for a product (default "{brand}-{model}")

        Returns:
            Dictionary of each product's own specs merged with the lookup
        """
        products = list(products)
        results: Dict[str, ProductSpecs] = {}

        for start in range(0, len(products), batch_size):
            for product in products[start:start + batch_size]:
                found = self.fetch_specs(product.brand, product.model, getattr(product, 'specs', None))
                results[key(product)] = found.value

            if start + batch_size < len(products):
                time.sleep(delay)

        return results

    def search_source(self, source: SpecSource, brand: str, model: str) -> Optional[SpecSearchResult]:
        """
        Search one source with each query variant until one yields specs.

        Returns:
            SpecSearchResult or None if no query produced anything
        """
        for template in self.queries:
            query = template.format(brand=brand, model=model)
            try:
                soup = self._get_soup(source.search_url, params={'s': query})
            except requests.RequestException as e:
                logger.debug("Search on %s failed for %r: %s", source.name, query, e)
                continue

            specs = extract_specs(soup, source)
            confidence = FIELD_CONFIDENCE * len(specs.to_dict())

            detail_url = self._find_product_link(soup, source, brand)
            if detail_url:
                detailed = self._scrape_detail_page(detail_url, source)
                if detailed is not None:
                    # The product page is more specific than the search page
                    specs = detailed.merge_missing(specs)
                    confidence += DETAIL_PAGE_CONFIDENCE

            if not specs.is_empty():
                return SpecSearchResult(
                    source=source.name,
                    specs=specs,
                    confidence=min(round(confidence, 2), MAX_CONFIDENCE),
                )

        return None

    def _get_soup(self, url: str, params: Optional[Dict[str, str]] = None) -> BeautifulSoup:
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return BeautifulSoup(response.text, "lxml")

    @staticmethod
    def _find_product_link(soup: BeautifulSoup, source: SpecSource, brand: str) -> Optional[str]:
        """First link whose href mentions the brand, made absolute."""
        brand_key = brand.lower().strip()
        if not brand_key:
            return None
        for anchor in soup.find_all('a', href=True):
            href = anchor['href']
            if brand_key in href.lower():
                return urljoin(source.base_url + '/', href)
        return None

    def _scrape_detail_page(self, url: str, source: SpecSource) -> Optional[ProductSpecs]:
        """Fetch a product page; None when the fetch fails."""
        try:
            soup = self._get_soup(url)
        except requests.RequestException as e:
            logger.debug("Detail page %s failed: %s", url, e)
            return None
        return extract_specs(soup, source)
