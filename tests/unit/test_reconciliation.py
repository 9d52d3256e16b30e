"""
Unit tests for the review step between matching and saving a dish.

Tests selection, name editing, removal, status labels and finalization.
"""
import pytest

from dishbook.services.match_schemas import MatchAction, MatchDecision
from dishbook.services.reconciliation import (
    clear_selection,
    edit_name,
    finalize,
    match_status,
    remove_decision,
    select_product,
)
from tests.factories import make_catalog


@pytest.fixture
def catalog():
    return make_catalog("masło", "masło ekstra", "margaryna", "smalec")


@pytest.fixture
def matched(catalog):
    return MatchDecision(
        recognized_name="masło",
        recognized_quantity="200",
        recognized_unit="g",
        matched_product=catalog[0],
        match_score=0.01,
        suggestions=catalog[:3],
        action=MatchAction.USE_EXISTING,
        selected_product_id=catalog[0].id,
    )


@pytest.fixture
def unmatched():
    return MatchDecision(
        recognized_name="Czosnek niedźwiedzi",
        recognized_quantity="1 pęczek",
        recognized_unit="",
        match_score=1,
    )


class TestSelectProduct:
    def test_select_suggestion(self, matched, catalog):
        result = select_product(matched, catalog[1].id)

        assert result.action == MatchAction.USE_EXISTING
        assert result.selected_product_id == catalog[1].id
        assert result.matched_product == catalog[1]

    def test_select_from_full_catalog(self, unmatched, catalog):
        result = select_product(unmatched, catalog[3].id, catalog)

        assert result.selected_product_id == catalog[3].id
        assert match_status(result) == "matched"

    def test_unknown_product_is_rejected(self, unmatched, catalog):
        with pytest.raises(ValueError):
            select_product(unmatched, 99, catalog)

    def test_input_is_not_mutated(self, matched, catalog):
        select_product(matched, catalog[1].id)

        assert matched.selected_product_id == catalog[0].id

    def test_clear_selection(self, matched):
        result = clear_selection(matched)

        assert result.action == MatchAction.CREATE_NEW
        assert result.selected_product_id is None
        assert result.matched_product is None
        assert result.suggestions == matched.suggestions


class TestEditName:
    def test_changed_name_marks_edited(self, unmatched):
        result = edit_name(unmatched, "  czosnek  ")

        assert result.action == MatchAction.EDIT
        assert result.edited_name == "czosnek"
        assert match_status(result) == "edited"

    def test_same_name_is_not_an_edit(self, unmatched):
        result = edit_name(unmatched, "Czosnek niedźwiedzi ")

        assert result.action == MatchAction.CREATE_NEW
        assert result.edited_name == "Czosnek niedźwiedzi"

    def test_blank_restores_recognized_name(self, unmatched):
        result = edit_name(unmatched, "   ")

        assert result.action == MatchAction.CREATE_NEW
        assert result.edited_name == "Czosnek niedźwiedzi"

    def test_edit_releases_selected_product(self, matched):
        result = edit_name(matched, "masło klarowane")

        assert result.selected_product_id is None
        assert result.action == MatchAction.EDIT


class TestRemoveDecision:
    def test_removes_by_position(self, matched, unmatched):
        result = remove_decision([matched, unmatched], 0)

        assert result == [unmatched]

    def test_out_of_range(self, matched):
        with pytest.raises(IndexError):
            remove_decision([matched], 1)
        with pytest.raises(IndexError):
            remove_decision([matched], -1)


class TestMatchStatus:
    def test_labels(self, matched, unmatched):
        assert match_status(matched) == "matched"
        assert match_status(unmatched) == "new"

    def test_use_existing_without_selection_is_pending(self, matched):
        pending = matched.model_copy(update={"selected_product_id": None})

        assert match_status(pending) == "pending"


class TestFinalize:
    def test_existing_product_binding(self, matched):
        [binding] = finalize([matched])

        assert binding.product_id == matched.selected_product_id
        assert binding.new_product_name is None
        assert binding.quantity == 200
        assert binding.unit_code == "g"

    def test_new_product_binding(self, unmatched):
        [binding] = finalize([unmatched])

        assert binding.product_id is None
        assert binding.new_product_name == "Czosnek niedźwiedzi"
        assert binding.quantity == 1
        assert binding.unit_code == "szt"

    def test_edited_name_wins(self, unmatched):
        [binding] = finalize([edit_name(unmatched, "czosnek")])

        assert binding.new_product_name == "czosnek"

    def test_suggestion_alone_creates_new_product(self, unmatched, catalog):
        suggested = unmatched.model_copy(update={"matched_product": catalog[0]})

        [binding] = finalize([suggested])

        assert binding.product_id is None
        assert binding.new_product_name == "Czosnek niedźwiedzi"

    def test_unparseable_quantity_and_unknown_unit(self):
        decision = MatchDecision(
            recognized_name="sól",
            recognized_quantity="szczypta",
            recognized_unit="szczypta",
            match_score=1,
        )

        [binding] = finalize([decision])

        assert binding.quantity is None
        assert binding.unit_code == "szt"

    def test_preserves_order(self, matched, unmatched):
        bindings = finalize([unmatched, matched])

        assert bindings[0].product_id is None
        assert bindings[1].product_id == matched.selected_product_id
