#!/usr/bin/env python3
"""
Regenerate data/category_embeddings.json from data/report_categories.json

Embeds each category's text_for_embedding with the configured provider
(Gemini when GEMINI_API_KEY is set, otherwise the hashing fallback) and
writes the vectors together with the model name and generation time.

Every vector in the file must come from the same model. If the remote
provider falls back for any category, the run aborts without writing.

Usage:
    python scripts/generate_category_embeddings.py
    python scripts/generate_category_embeddings.py --output /tmp/embeddings.json
"""
import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from packages.common.config import get_settings
from packages.domain.categorization.category_store import CategoryStore
from packages.domain.categorization.schemas import CategoryEmbeddingSet
from packages.embeddings import create_embedding_provider

logger = structlog.get_logger()


async def generate(categories_path: Path, output_path: Path) -> CategoryEmbeddingSet:
    """Embed every category and write the embeddings file"""
    settings = get_settings()
    store = CategoryStore(categories_path=categories_path)
    provider = create_embedding_provider(settings)

    categories = store.categories()
    embeddings = {}

    for category_id, category in categories.items():
        result = await provider.embed(category.text_for_embedding)
        if result.fallback_reason:
            logger.error("category_embedding_fell_back",
                         category=category_id,
                         reason=result.fallback_reason)
            raise RuntimeError(
                f"Embedding for {category_id} fell back ({result.fallback_reason}); "
                "refusing to write a file with mixed models"
            )

        embeddings[category_id] = result.vector
        print(f'  ✓ {category_id:<28} {category.name}')

    model_name = provider.model_name

    embedding_set = CategoryEmbeddingSet(
        generated_at=datetime.now(timezone.utc),
        model_name=model_name,
        embeddings=embeddings,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(embedding_set.model_dump(mode="json", by_alias=True), f, indent=2)

    logger.info("category_embeddings_written",
                path=str(output_path),
                model=model_name,
                count=len(embeddings))

    return embedding_set


async def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Generate category embeddings")
    parser.add_argument("--categories", default=settings.categories_path,
                        help="Path to report_categories.json")
    parser.add_argument("--output", default=settings.category_embeddings_path,
                        help="Where to write category_embeddings.json")
    args = parser.parse_args()

    print('='*80)
    print('CATEGORY EMBEDDING GENERATION')
    print('='*80)
    print()

    embedding_set = await generate(Path(args.categories), Path(args.output))

    print()
    print(f'✅ Wrote {len(embedding_set.embeddings)} embeddings '
          f'({embedding_set.model_name}) to {args.output}')


if __name__ == "__main__":
    asyncio.run(main())
