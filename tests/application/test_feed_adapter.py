"""Tests for the Fake Store feed adapter and the feed factory."""

from unittest.mock import Mock

import pytest
import requests

from storefront.catalogue.feed import CatalogFeedUnavailable, get_feed, reset_feed, set_feed
from storefront.catalogue.feed.fake_store import FakeStoreFeed
from storefront.catalogue.feed.static import StaticSeedFeed

URL = "https://feed.test/products"


def _session_returning(payload=None, error=None):
    session = Mock(spec=requests.Session)
    if error is not None:
        session.get.side_effect = error
    else:
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = payload
        session.get.return_value = response
    return session


class TestFakeStoreFeed:
    def test_maps_title_to_name(self):
        session = _session_returning(
            [
                {
                    "id": 1,
                    "title": "Fjallraven Backpack",
                    "price": 109.95,
                    "description": "Fits 15 inch laptops",
                    "category": "men's clothing",
                    "image": "https://img.test/1.jpg",
                    "rating": {"rate": 3.9, "count": 120},
                }
            ]
        )
        products = FakeStoreFeed(URL, timeout=3, session=session).fetch()

        session.get.assert_called_once_with(URL, timeout=3)
        assert len(products) == 1
        product = products[0]
        assert product.name == "Fjallraven Backpack"
        assert product.price == 109.95
        assert product.category == "men's clothing"
        assert product.rating == {"rate": 3.9, "count": 120}

    def test_missing_optional_fields(self):
        products = FakeStoreFeed(URL, session=_session_returning([{"title": "Bare", "price": "5"}])).fetch()
        assert products[0].to_dict() == {
            "name": "Bare",
            "price": 5.0,
            "description": "",
            "category": "",
            "image": "",
            "rating": None,
        }

    def test_connection_error(self):
        feed = FakeStoreFeed(URL, session=_session_returning(error=requests.ConnectionError("refused")))
        with pytest.raises(CatalogFeedUnavailable):
            feed.fetch()

    def test_payload_must_be_a_list(self):
        with pytest.raises(CatalogFeedUnavailable):
            FakeStoreFeed(URL, session=_session_returning({"products": []})).fetch()

    @pytest.mark.parametrize("record", [{"price": 1.0}, {"title": "No price"}, {"title": "Bad", "price": "abc"}])
    def test_malformed_record(self, record):
        with pytest.raises(CatalogFeedUnavailable):
            FakeStoreFeed(URL, session=_session_returning([record])).fetch()


class TestFeedFactory:
    def test_configured_feed_is_static_under_test(self):
        reset_feed()
        assert isinstance(get_feed(), StaticSeedFeed)

    def test_get_feed_is_cached(self):
        assert get_feed() is get_feed()

    def test_set_feed_overrides(self):
        feed = StaticSeedFeed([])
        set_feed(feed)
        assert get_feed() is feed
