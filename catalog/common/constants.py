"""
Shared constants for the project.

Values that must have a single source of truth across import, enrichment
and filtering.
"""

# Supplier placeholder meaning "not applicable / unknown"
NOT_APPLICABLE = "NA"

# Color placeholder for lots with assorted colors
MIXED_COLOR = "Mixed"

# Prefix of generated catalog product ids
PRODUCT_ID_PREFIX = "pm-product_"

# Number of columns in a supplier inventory export row
INVENTORY_COLUMN_COUNT = 21

# Browser-like User-Agent for outbound lookups
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
