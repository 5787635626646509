"""
Description Builder

Turns looked-up specifications into a one-sentence marketing description.
"""

from ..models import ProductSpecs

GENERIC_DESCRIPTION = "A high-quality smartphone with modern features and specifications."


def generate_description_from_specs(specs: ProductSpecs, brand: str, model: str) -> str:
    """
    Build a description from technical specs.

    Args:
        specs: Product specs (only lookup attributes are used)
        brand: Manufacturer name
        model: Model name

    Returns:
        "{brand} {model} - clause, clause." or a generic sentence when no
        technical spec is known

    Example:
        >>> generate_description_from_specs(ProductSpecs(display='6.1"', os='iOS 17'), 'Apple', 'iPhone 15')
        'Apple iPhone 15 - Features a 6.1", running iOS 17.'
    """
    parts = []

    if specs.display:
        parts.append(f"Features a {specs.display}")

    if specs.processor:
        parts.append(f"powered by {specs.processor}")

    if specs.memory and specs.storage:
        parts.append(f"with {specs.memory} RAM and {specs.storage} storage")
    elif specs.memory:
        parts.append(f"with {specs.memory} RAM")
    elif specs.storage:
        parts.append(f"with {specs.storage} storage")

    if specs.camera:
        parts.append(f"and {specs.camera}")

    if specs.battery:
        parts.append(f"with {specs.battery} battery")

    if specs.os:
        parts.append(f"running {specs.os}")

    if not parts:
        return f"{brand} {model} - {GENERIC_DESCRIPTION}"

    return f"{brand} {model} - {', '.join(parts)}."
