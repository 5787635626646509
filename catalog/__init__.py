"""
Device Catalog Tool

Modules:
    models      - Data models (InventoryItem, Product, ProductSpecs, ImportResult)
    common      - Shared utilities (config loader, logging, CSV utils)
    importing   - Inventory parsing, product derivation and bulk import
    enrichment  - Best-effort image and specification lookup
    store       - Catalog store implementations and public feed
    filters     - Faceted filter engine for catalog browsing
"""
