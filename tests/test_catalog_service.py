"""
Catalog service tests: listing order, filters, search and review updates.
"""
import pytest

from repricing_tool.engine import ProductStatus, PriceBracket
from repricing_tool.engine.errors import ProductNotFoundError


def skus(listing):
    return [p['sku'] for p in listing['data']]


def test_pending_listing_orders_by_abc_then_daily_loss(seeded_state):
    listing = seeded_state.catalog.list_products()
    assert skus(listing) == ['A-101', 'A-100', 'B-200', 'C-300', 'N-400']
    assert listing['meta'] == {'total': 5, 'page': 1, 'limit': 50}


def test_daily_loss_is_derived(seeded_state):
    listing = seeded_state.catalog.list_products()
    by_sku = {p['sku']: p for p in listing['data']}
    assert by_sku['A-100']['daily_loss'] == pytest.approx(60.0)
    assert by_sku['A-101']['daily_loss'] == pytest.approx(150.0)
    assert by_sku['N-400']['daily_loss'] == 0


def test_pagination(seeded_state):
    first = seeded_state.catalog.list_products(page=1, limit=2)
    second = seeded_state.catalog.list_products(page=2, limit=2)
    third = seeded_state.catalog.list_products(page=3, limit=2)
    assert skus(first) == ['A-101', 'A-100']
    assert skus(second) == ['B-200', 'C-300']
    assert skus(third) == ['N-400']
    assert third['meta']['total'] == 5


def test_limit_is_capped(seeded_state):
    seeded_state.catalog.max_page_size = 3
    listing = seeded_state.catalog.list_products(limit=100)
    assert listing['meta']['limit'] == 3
    assert len(listing['data']) == 3


def test_status_filter_and_all(seeded_state):
    catalog = seeded_state.catalog
    catalog.approve('A-100', 1290)
    catalog.defer('C-300')

    assert skus(catalog.list_products(status='approved')) == ['A-100']
    assert skus(catalog.list_products(status='deferred')) == ['C-300']
    assert skus(catalog.list_products(status='pending')) == ['A-101', 'B-200', 'N-400']
    assert catalog.list_products(status='all')['meta']['total'] == 5


def test_search_is_case_insensitive_for_cyrillic(seeded_state):
    listing = seeded_state.catalog.list_products(q='ЧАЙНИК')
    assert sorted(skus(listing)) == ['A-100', 'A-101']


def test_search_requires_every_term(seeded_state):
    listing = seeded_state.catalog.list_products(q='  чайник   заварочный ')
    assert skus(listing) == ['A-101']


def test_search_matches_sku(seeded_state):
    assert sorted(skus(seeded_state.catalog.list_products(q='a-10'))) == ['A-100', 'A-101']
    assert skus(seeded_state.catalog.list_products(q='salt')) == ['N-400']


def test_search_without_match(seeded_state):
    listing = seeded_state.catalog.list_products(q='nothing-like-this')
    assert listing == {'data': [], 'meta': {'total': 0, 'page': 1, 'limit': 50}}


def test_approve_reset_cycle(seeded_state):
    catalog = seeded_state.catalog

    approved = catalog.approve('B-200', 110)
    assert approved.status is ProductStatus.APPROVED
    assert approved.new_price == 110

    reset = catalog.reset('B-200')
    assert reset.status is ProductStatus.PENDING
    assert reset.new_price is None


def test_manual_flag_update(seeded_state):
    product = seeded_state.catalog.update_product('C-300', {'manual_flag': True})
    assert product.manual_flag is True
    assert product.status is ProductStatus.PENDING


def test_update_ignores_unknown_fields(seeded_state):
    product = seeded_state.catalog.update_product('C-300', {'current_price': 1, 'name': 'x'})
    assert product.current_price == 40
    assert product.name == 'Ложка чайная'


def test_update_unknown_sku(seeded_state):
    with pytest.raises(ProductNotFoundError):
        seeded_state.catalog.update_product('NOPE', {'status': 'approved'})


def test_update_rejects_unknown_status(seeded_state):
    with pytest.raises(ValueError):
        seeded_state.catalog.update_product('C-300', {'status': 'archived'})


def test_suggestions_for_stored_product(seeded_state):
    result = seeded_state.catalog.suggestions_for('N-400')
    assert result.bracket is PriceBracket.PREMIUM
    assert result.candidates == [2150, 2190, 2200]


def test_count_by_status(seeded_state):
    seeded_state.catalog.approve('A-100', 1290)
    assert seeded_state.catalog.count_by_status() == {
        'pending': 4, 'approved': 1, 'deferred': 0, 'exported': 0,
    }


def test_default_page_size_applies_without_limit(seeded_state):
    seeded_state.catalog.default_page_size = 2
    listing = seeded_state.catalog.list_products()
    assert listing['meta']['limit'] == 2
    assert [p['sku'] for p in listing['data']] == ['A-101', 'A-100']
