"""Public URL paths for content."""

from urllib.parse import quote

from backend.content_routing.models.common import DocumentKind, Locale


def kind_path(kind: DocumentKind, kind_paths: dict[str, str]) -> str:
    """URL segment for a kind, e.g. article -> "news"."""
    return kind_paths.get(kind.value, kind.value)


def kind_from_path(segment: str, kind_paths: dict[str, str]) -> DocumentKind | None:
    """Reverse of kind_path; None for an unknown segment."""
    for kind_value, path in kind_paths.items():
        if path == segment:
            try:
                return DocumentKind(kind_value)
            except ValueError:
                return None
    return None


def build_path(locale: Locale, kind: DocumentKind, slug: str, kind_paths: dict[str, str]) -> str:
    """Build /{locale}/{kind-path}/{slug} with the slug percent-encoded."""
    return f"/{locale}/{kind_path(kind, kind_paths)}/{quote(slug, safe='')}"
