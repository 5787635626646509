"""
Product Image Fetcher

Finds an image URL for a device using an ordered chain of strategies:
1. Known product map (exact model lookup from config)
2. Brand CDN probe (Apple storeimages URL, then configured OEM patterns),
   each candidate verified with a HEAD request
3. Web image search URL built from brand, model and color
4. Configured placeholder

Every strategy may fail; the chain always ends with a usable value.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote, urlparse

import requests

from ..common.config_loader import load_image_sources
from ..common.constants import USER_AGENT
from ..common.text_utils import normalize_whitespace, slugify, strip_punctuation
from .result import EnrichmentResult, model_key

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "/images/no-image.png"

# Errors a strategy may raise that must not escape the fetcher
STRATEGY_ERRORS = (requests.RequestException, ValueError, KeyError, TypeError, AttributeError)


class ImageFetcher:
    """
    Best-effort product image lookup.

    Usage:
        with ImageFetcher() as fetcher:
            result = fetcher.fetch_image("Apple", "iPhone 15", "Blue")
            result.value   # URL or placeholder path
            result.source  # "known_product", "oem_cdn", "image_search" or "placeholder"
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            config: Image source settings (if None, loads image_sources.yaml)
            session: Shared HTTP session (a new one is created if None)
        """
        if config is None:
            config = load_image_sources()

        self.placeholder = config.get('placeholder') or DEFAULT_PLACEHOLDER
        self.timeout = config.get('timeout', 5)
        self.image_domains = [d.lower() for d in config.get('image_domains', [])]
        self.image_extensions = [e.lower() for e in config.get('image_extensions', [])]
        self.product_images = {
            str(k).lower().strip(): v for k, v in (config.get('product_images') or {}).items()
        }
        self.oem = {str(k).lower(): v for k, v in (config.get('oem') or {}).items()}
        self.apple_cdn_template = config.get('apple_cdn_template', '')
        self.search_url_template = config.get('search_url_template', '')

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    @property
    def strategies(self) -> List[Tuple[str, Callable[[str, str, str], Optional[str]]]]:
        """Named strategies in the order they are tried."""
        return [
            ('known_product', self._from_known_products),
            ('oem_cdn', self._from_oem_cdn),
            ('image_search', self._from_image_search),
        ]

    def fetch_image(self, brand: str, model: str, color: str = "") -> EnrichmentResult[str]:
        """
        Find an image URL for a device. Never raises.

        Args:
            brand: Manufacturer name
            model: Model name
            color: Color name (optional, sentinel values should be passed as "")

        Returns:
            EnrichmentResult whose value is a URL or the placeholder path
        """
        result: EnrichmentResult[str] = EnrichmentResult()
        brand = brand or ""
        model = model or ""
        color = color or ""

        for name, strategy in self.strategies:
            try:
                url = strategy(brand, model, color)
            except STRATEGY_ERRORS as e:
                logger.warning("Image strategy %s failed for %s %s: %s", name, brand, model, e)
                result.fail(name, f"{type(e).__name__}: {str(e)[:100]}")
                continue

            if url:
                logger.debug("Image for %s %s found by %s: %s", brand, model, name, url)
                result.value = url
                result.source = name
                return result

            result.fail(name, "no match")

        logger.info("No image found for %s %s, using placeholder", brand, model)
        result.value = self.placeholder
        result.source = 'placeholder'
        return result

    def fetch_images(
        self,
        products: Iterable[Any],
        batch_size: int = 5,
        delay: float = 1.0,
        key: Callable[[Any], str] = model_key,
    ) -> Dict[str, str]:
        """
        Look up images for several products, pausing between batches.

        Args:
            products: Objects with brand, model and optional specs.color
            batch_size: Products per batch
            delay: Seconds to sleep between batches
            key: Builds the result key for a product (default "{brand}-{model}";
                pass a per-product key when several color variants share a model)

        Returns:
            Dictionary of found URLs only (placeholders are left out)
        """
        products = list(products)
        found: Dict[str, str] = {}

        for start in range(0, len(products), batch_size):
            for product in products[start:start + batch_size]:
                specs = getattr(product, 'specs', None)
                color = getattr(specs, 'color', None) or ""
                result = self.fetch_image(product.brand, product.model, color)
                if result.ok:
                    found[key(product)] = result.value

            if start + batch_size < len(products):
                time.sleep(delay)

        return found

    def _from_known_products(self, brand: str, model: str, color: str) -> Optional[str]:
        return self.product_images.get(model.lower().strip())

    def _from_oem_cdn(self, brand: str, model: str, color: str) -> Optional[str]:
        for candidate in self._oem_candidates(brand, model, color):
            if self.is_valid_image_url(candidate):
                return candidate
        return None

    def _oem_candidates(self, brand: str, model: str, color: str) -> List[str]:
        """Build CDN URLs worth probing for this brand."""
        brand_key = brand.lower().strip()
        model_slug = slugify(model)
        color_slug = slugify(color)
        candidates = []

        if brand_key == 'apple' and model_slug and self.apple_cdn_template:
            candidates.append(self.apple_cdn_template.format(model=model_slug, color=color_slug))

        oem_config = self.oem.get(brand_key)
        if oem_config and color_slug:
            base_url = oem_config.get('base_url', '')
            for pattern in oem_config.get('patterns', []):
                candidates.append(base_url + pattern.format(color=color_slug))

        return candidates

    def _from_image_search(self, brand: str, model: str, color: str) -> Optional[str]:
        query = normalize_whitespace(
            f"{strip_punctuation(brand)} {strip_punctuation(model)} {strip_punctuation(color)}"
        )
        if not query or not self.search_url_template:
            return None
        return self.search_url_template.format(query=quote(query, safe=''))

    def looks_like_image_url(self, url: str) -> bool:
        """Check scheme, host and that the URL has an image extension or a known image host."""
        if not url or not isinstance(url, str):
            return False

        parsed = urlparse(url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            return False

        lowered = url.lower()
        has_extension = any(ext in lowered for ext in self.image_extensions)
        host = parsed.netloc.lower()
        has_domain = any(host == d or host.endswith("." + d) for d in self.image_domains)
        return has_extension or has_domain

    def is_valid_image_url(self, url: str) -> bool:
        """
        Verify a candidate URL answers a HEAD request with 200.

        Network errors count as "not valid" so the next candidate is tried.
        """
        if not self.looks_like_image_url(url):
            return False

        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.debug("Image probe failed for %s: %s", url, e)
            return False

        return response.status_code == 200
