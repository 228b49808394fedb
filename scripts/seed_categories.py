"""Seed the category catalog from a JSON file.

Usage: python -m scripts.seed_categories [path/to/categories.json]

The file holds a list of ``{"name": ..., "description": ..., "icon": ...}``.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List

from sqlalchemy import select

from lp.db import base
from lp.models import Category
from lp.schemas.categories import CategoryCreate

logger = logging.getLogger(__name__)

DEFAULT_FILE = Path(__file__).parent / "data" / "categories.json"


def load_categories(path: Path) -> List[CategoryCreate]:
    """Read and validate category definitions."""
    with open(path, "r") as f:
        raw: List[Dict] = json.load(f)
    return [CategoryCreate.model_validate(item) for item in raw]


async def seed_categories(categories: List[CategoryCreate]) -> int:
    """Insert categories that do not exist yet; returns how many were added."""
    if base.AsyncSessionLocal is None:
        await base.init_db()

    added = 0
    async with base.AsyncSessionLocal() as session:
        existing = await session.execute(select(Category.name))
        names = set(existing.scalars().all())
        for data in categories:
            if data.name in names:
                logger.info("Category %s already exists", data.name)
                continue
            session.add(Category(**data.model_dump()))
            names.add(data.name)
            added += 1
        await session.commit()
    return added


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_FILE
    categories = load_categories(path)
    added = asyncio.run(seed_categories(categories))
    logger.info("Seeded %d of %d categories from %s", added, len(categories), path)


if __name__ == "__main__":
    main()
