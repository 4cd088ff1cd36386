import pytest

from marketplace.models.listing_model import Listing, ListingItem
from marketplace.services.listing_query_service import ListingQueryService


@pytest.fixture
def listings(db_session, sample_tree):
    t = sample_tree
    carpet_shop = Listing(title="Carpet Pros", category_id=t["carpets"].id)
    party = Listing(title="Party Planners", category_id=t["events"].id)
    # Filed under events, but one item is a garden service
    party.items.append(ListingItem(name="Garden setup", price=120, categories=[t["garden"]]))
    caterer = Listing(title="Fine Catering", category_id=t["catering"].id)
    retired = Listing(title="Closed Shop", category_id=t["cleaning"].id, is_active=False)
    db_session.add_all([carpet_shop, party, caterer, retired])
    db_session.commit()
    return {"carpet_shop": carpet_shop, "party": party, "caterer": caterer}


def _titles(results):
    return sorted(r["title"] for r in results)


class TestListingQueryService:
    def test_no_category_returns_all_active(self, uow, listings):
        assert _titles(ListingQueryService(uow).search()) == [
            "Carpet Pros",
            "Fine Catering",
            "Party Planners",
        ]

    def test_all_sentinel(self, uow, listings):
        assert len(ListingQueryService(uow).search("all")) == 3

    def test_category_matches_whole_subtree(self, uow, sample_tree, listings):
        results = ListingQueryService(uow).search(sample_tree["cleaning"].id)

        assert _titles(results) == ["Carpet Pros"]

    def test_item_level_category_matches(self, uow, sample_tree, listings):
        results = ListingQueryService(uow).search(sample_tree["home"].id)

        assert _titles(results) == ["Carpet Pros", "Party Planners"]

    def test_subcategory_restriction(self, uow, sample_tree, listings):
        t = sample_tree
        results = ListingQueryService(uow).search(t["home"].id, [t["garden"].id])

        assert _titles(results) == ["Party Planners"]
        assert results[0]["items"][0]["category_ids"] == [t["garden"].id]
        assert results[0]["items"][0]["price"] == 120.0

    def test_unrelated_subcategory_falls_back(self, uow, sample_tree, listings):
        t = sample_tree
        service = ListingQueryService(uow)

        assert _titles(service.search(t["events"].id, [t["carpets"].id])) == _titles(
            service.search(t["events"].id)
        )
