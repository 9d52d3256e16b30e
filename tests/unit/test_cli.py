"""
Unit tests for CLI commands.

Tests the command-line interface for matching recognized recipes, creating
tables and seeding the product vocabulary.
"""
import json
import sys
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from dishbook.cli import init_db, main, match_recipe
from dishbook.services.product_matcher import ProductMatcher
from tests.factories import create_product
from tests.fixtures.mocks import StubVerifier


@pytest.fixture
def recipe_file(tmp_path):
    path = tmp_path / "recipe.json"
    path.write_text(
        json.dumps(
            {
                "name": "Jajecznica",
                "ingredients": [
                    {"name": "Jajka", "quantity": "3", "unit": "szt"},
                    {"name": "szczypiorek", "quantity": "1 pęczek"},
                ],
                "tags": ["śniadanie"],
            }
        ),
        encoding="utf-8",
    )
    return path


def printed_json(mock_print):
    return json.loads(mock_print.call_args[0][0])


# =============================================================================
# match_recipe Tests
# =============================================================================


class TestMatchRecipe:
    """Tests for the match_recipe function."""

    def test_prints_one_decision_per_ingredient(self, db: Session, recipe_file):
        create_product(db, "jajko")
        db.commit()

        with patch("dishbook.cli.SessionLocal", return_value=db), \
             patch("dishbook.cli.build_matcher", return_value=ProductMatcher(StubVerifier())), \
             patch("builtins.print") as mock_print:

            match_recipe(str(recipe_file))

        output = printed_json(mock_print)
        assert [d["recognizedName"] for d in output] == ["Jajka", "szczypiorek"]
        assert output[0]["action"] == "use_existing"
        assert output[0]["status"] == "matched"
        assert output[0]["matchedProduct"]["name"] == "jajko"
        assert output[1]["action"] == "create_new"
        assert output[1]["status"] == "new"

    def test_owner_products_are_included(self, db: Session, recipe_file):
        create_product(db, "szczypiorek", owner_id="user-1")
        db.commit()

        with patch("dishbook.cli.SessionLocal", return_value=db), \
             patch("dishbook.cli.build_matcher", return_value=ProductMatcher(StubVerifier())), \
             patch("builtins.print") as mock_print:

            match_recipe(str(recipe_file), owner_id="user-1")

        output = printed_json(mock_print)
        assert output[1]["status"] == "matched"

    def test_missing_file(self, tmp_path):
        with patch("builtins.print") as mock_print, \
             pytest.raises(SystemExit) as exc_info:

            match_recipe(str(tmp_path / "missing.json"))

        assert exc_info.value.code == 1
        assert "cannot read" in str(mock_print.call_args)

    def test_invalid_recipe(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"ingredients": "nope"}', encoding="utf-8")

        with patch("builtins.print") as mock_print, \
             pytest.raises(SystemExit) as exc_info:

            match_recipe(str(path))

        assert exc_info.value.code == 1
        assert "not a recognized recipe" in str(mock_print.call_args)


# =============================================================================
# init_db Tests
# =============================================================================


class TestInitDb:
    def test_creates_tables(self):
        engine = create_engine("sqlite://", poolclass=StaticPool)

        with patch("dishbook.cli.engine", engine), \
             patch("builtins.print"):

            init_db()

        assert {"products", "dishes", "dish_ingredients", "tags", "dish_tags"} <= set(
            inspect(engine).get_table_names()
        )
        engine.dispose()


# =============================================================================
# main() Tests
# =============================================================================


class TestMain:
    """Tests for argument parsing in main()."""

    def test_match_command(self):
        with patch.object(sys, "argv", ["dishbook", "match", "r.json", "--owner", "u1"]), \
             patch("dishbook.cli.match_recipe") as mock_match:

            main()

        mock_match.assert_called_once_with("r.json", "u1")

    def test_init_db_command(self):
        with patch.object(sys, "argv", ["dishbook", "init-db"]), \
             patch("dishbook.cli.init_db") as mock_init:

            main()

        mock_init.assert_called_once_with()

    def test_seed_products_command(self):
        with patch.object(sys, "argv", ["dishbook", "seed-products"]), \
             patch("dishbook.cli.seed_products") as mock_seed:

            main()

        mock_seed.assert_called_once_with()

    def test_no_command_prints_help(self):
        with patch.object(sys, "argv", ["dishbook"]), \
             patch("builtins.print"), \
             pytest.raises(SystemExit) as exc_info:

            main()

        assert exc_info.value.code == 1
