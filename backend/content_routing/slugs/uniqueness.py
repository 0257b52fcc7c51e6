"""Write-side slug disambiguation."""

from collections.abc import Awaitable, Callable


async def ensure_unique_slug(
    base_slug: str,
    exists: Callable[[str], Awaitable[bool]],
    fallback: str = "item",
) -> str:
    """Return base_slug, or the first free base-2, base-3, ... candidate.

    Args:
        base_slug: Slug produced by generate_slug
        exists: Async predicate answering "is this slug taken in the namespace?"
        fallback: Used when base_slug is empty

    Returns:
        A slug for which exists() returned False
    """
    base = (base_slug or "").strip("-") or fallback
    candidate = base
    n = 2
    while await exists(candidate):
        candidate = f"{base}-{n}"
        n += 1
    return candidate
