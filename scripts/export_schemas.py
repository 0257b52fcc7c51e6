"""Export JSON schemas for the public content responses."""

import json
from pathlib import Path

from backend.content_routing.api.routes.content import DocumentResponse
from backend.content_routing.models import FeedPage, ResolvedView


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in (ResolvedView, FeedPage, DocumentResponse):
        schema_path = schemas_dir / f"{model.__name__}.schema.json"
        with open(schema_path, "w") as f:
            json.dump(model.model_json_schema(), f, indent=2, ensure_ascii=False)
        print(f"Exported {model.__name__} schema to {schema_path}")


if __name__ == "__main__":
    main()
