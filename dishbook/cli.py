"""CLI commands for Dishbook."""

import argparse
import asyncio
import json
import sys

from pydantic import ValidationError
from sqlalchemy.orm import Session

from dishbook.database import SessionLocal, engine
from dishbook.models import create_all_tables
from dishbook.seed_products import seed_products
from dishbook.services.catalog_service import CatalogService
from dishbook.services.match_schemas import RecognizedRecipe
from dishbook.services.product_matcher import build_matcher
from dishbook.services.reconciliation import match_status


def match_recipe(recipe_path: str, owner_id: str | None = None) -> None:
    """Match a recognized recipe (JSON file) against the catalog and print the decisions."""
    try:
        with open(recipe_path, encoding="utf-8") as f:
            recipe = RecognizedRecipe.model_validate_json(f.read())
    except OSError as e:
        print(f"Error: cannot read {recipe_path}: {e}")
        sys.exit(1)
    except ValidationError as e:
        print(f"Error: {recipe_path} is not a recognized recipe: {e}")
        sys.exit(1)

    db: Session = SessionLocal()

    try:
        catalog = CatalogService.get_catalog(db, owner_id)
    finally:
        db.close()

    decisions = asyncio.run(build_matcher().match_all(recipe.ingredients, catalog))

    output = [
        {
            **decision.model_dump(mode="json", by_alias=True),
            "status": match_status(decision),
        }
        for decision in decisions
    ]
    print(json.dumps(output, ensure_ascii=False, indent=2))


def init_db() -> None:
    """Create missing tables in the configured database."""
    create_all_tables(engine)
    print("Database tables created.")


def main():
    parser = argparse.ArgumentParser(description="Dishbook CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # match command
    match_parser = subparsers.add_parser(
        "match", help="Match a recognized recipe's ingredients to products"
    )
    match_parser.add_argument("recipe", help="Path to recognized recipe JSON")
    match_parser.add_argument(
        "--owner", help="User ID whose own products are included in the catalog"
    )

    # init-db command
    subparsers.add_parser("init-db", help="Create database tables")

    # seed-products command
    subparsers.add_parser("seed-products", help="Seed the global product vocabulary")

    args = parser.parse_args()

    if args.command == "match":
        match_recipe(args.recipe, args.owner)
    elif args.command == "init-db":
        init_db()
    elif args.command == "seed-products":
        seed_products()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
