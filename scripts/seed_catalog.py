#!/usr/bin/env python3
"""Seed product catalog script.

Generates the deterministic demo catalog and saves it to the
database configured by DATABASE_URL.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --mode full --seed 7
    python scripts/seed_catalog.py --mode small --clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete

from storefront.catalog.generator import GeneratorConfig, seed_catalog
from storefront.catalog.repository import SqlProductRepository
from storefront.infrastructure.database import create_tables, get_session_factory
from storefront.infrastructure.models import ProductRow


async def seed(config: GeneratorConfig, clear: bool) -> dict:
    """Seed the catalog in one transaction.

    Args:
        config: Generator configuration.
        clear: Whether to delete existing products first.

    Returns:
        Seeding result.
    """
    async with get_session_factory()() as session:
        deleted = 0
        if clear:
            result = await session.execute(delete(ProductRow))
            deleted = result.rowcount or 0

        created = await seed_catalog(SqlProductRepository(session), config)
        await session.commit()

    return {"deleted": deleted, "products_created": created}


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the storefront product catalog",
    )
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (~20 products) or full (~100 products)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: the mode's seed)",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing products and their reviews before seeding",
    )

    args = parser.parse_args()

    config = GeneratorConfig.full() if args.mode == "full" else GeneratorConfig.small()
    if args.seed is not None:
        config.seed = args.seed

    print("=" * 60)
    print("Storefront Catalog Seeder")
    print("=" * 60)
    print(f"Mode: {args.mode}")
    print(f"Seed: {config.seed}")
    print(f"Clear existing: {args.clear}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    result = await seed(config, clear=args.clear)

    print(f"  Deleted: {result['deleted']} existing products")
    print(f"  Created: {result['products_created']} products")
    print()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
