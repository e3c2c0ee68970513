"""
Product admin actions: delete, show/hide and reorder.
"""

import pytest
from sqlalchemy import update

from ldcshop.core.database import db
from ldcshop.core.exceptions import ConflictError, NotFoundError, ValidationError
from ldcshop.core.models import Product
from ldcshop.modules.merchandise.service import (
    get_products,
    low_stock_count,
    reorder_product,
    toggle_product_status,
)


@pytest.fixture
def three_products(app, make_product):
    return [make_product(sort_order=i) for i in range(3)]


def _display_ids():
    db.session.expire_all()
    return [product.id for product in get_products(db.session)]


def _sort_orders():
    db.session.expire_all()
    return {product.id: product.sort_order for product in Product.query.all()}


# ---------------------------------------------------------------------------
# Reorder
# ---------------------------------------------------------------------------

def test_move_middle_up(three_products):
    first, middle, last = [p.id for p in three_products]

    assert reorder_product(db.session, middle, "up") is True

    assert _display_ids() == [middle, first, last]


def test_move_middle_down(three_products):
    first, middle, last = [p.id for p in three_products]

    assert reorder_product(db.session, middle, "down") is True

    assert _display_ids() == [first, last, middle]


def test_move_with_gapped_sort_orders(app, make_product):
    first, middle, last = [make_product(sort_order=n).id for n in (10, 20, 30)]

    assert reorder_product(db.session, last, "up") is True

    assert _display_ids() == [first, last, middle]
    orders = _sort_orders()
    assert (orders[first], orders[last], orders[middle]) == (10, 20, 30)


def test_move_between_tied_sort_orders(app, make_product):
    first, middle, last = [make_product(sort_order=n).id for n in (10, 20, 20)]

    assert reorder_product(db.session, last, "up") is True

    assert _display_ids() == [first, last, middle]
    assert sorted(_sort_orders().values()) == [0, 1, 2]


def test_move_past_the_edge_is_a_no_op(three_products):
    first, _, last = [p.id for p in three_products]
    before = _sort_orders()

    assert reorder_product(db.session, first, "up") is False
    assert reorder_product(db.session, last, "down") is False

    assert _sort_orders() == before


def test_reorder_rejects_bad_input(three_products):
    with pytest.raises(ValidationError):
        reorder_product(db.session, three_products[0].id, "sideways")
    with pytest.raises(NotFoundError):
        reorder_product(db.session, "missing", "up")


class RacingSession:
    """Session proxy that lets another writer commit just before the first UPDATE"""

    def __init__(self, session, race):
        self._session = session
        self._race = race

    def execute(self, *args, **kwargs):
        if self._race is not None:
            race, self._race = self._race, None
            race()
        return self._session.execute(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._session, name)


def test_concurrent_change_aborts_whole_swap(three_products):
    first, middle, _ = [p.id for p in three_products]

    def someone_else_moves_first():
        with db.engine.begin() as conn:
            conn.execute(update(Product).where(Product.id == first).values(sort_order=7))

    session = RacingSession(db.session, someone_else_moves_first)

    with pytest.raises(ConflictError):
        reorder_product(session, middle, "up")

    orders = _sort_orders()
    # The middle row's own update was rolled back with the failed swap
    assert orders[middle] == 1
    assert orders[first] == 7


# ---------------------------------------------------------------------------
# Toggle / delete
# ---------------------------------------------------------------------------

def test_toggle_flips_or_sets(app, make_product):
    product = make_product(is_active=True)

    assert toggle_product_status(db.session, product.id) is False
    assert toggle_product_status(db.session, product.id, True) is True
    assert toggle_product_status(db.session, product.id, True) is True


def test_low_stock_count(app, make_product):
    products = [make_product(stock=stock) for stock in (0, 5, 6, 50)]
    assert low_stock_count(products, 5) == 2


def test_toggle_route(admin_client, make_product):
    product = make_product(is_active=True)

    response = admin_client.post(f"/admin/products/{product.id}/toggle", json={"is_active": False})
    assert response.get_json() == {"success": True, "is_active": False}

    response = admin_client.post(f"/admin/products/{product.id}/toggle", json={})
    assert response.get_json()["is_active"] is True

    response = admin_client.post(f"/admin/products/{product.id}/toggle", json={"is_active": "no"})
    assert response.status_code == 400


def test_delete_route(admin_client, make_product):
    product = make_product()

    response = admin_client.post(f"/admin/products/{product.id}/delete")
    assert response.get_json() == {"success": True}

    db.session.expire_all()
    assert db.session.get(Product, product.id) is None

    response = admin_client.post(f"/admin/products/{product.id}/delete")
    assert response.status_code == 404
    assert response.get_json() == {"success": False, "error": "Product not found"}


def test_reorder_route(admin_client, make_product):
    first = make_product(sort_order=0)
    second = make_product(sort_order=1)

    response = admin_client.post(f"/admin/products/{second.id}/reorder", json={"direction": "up"})
    assert response.get_json() == {"success": True, "moved": True}
    assert _display_ids() == [second.id, first.id]

    response = admin_client.post(f"/admin/products/{second.id}/reorder", json={"direction": "up"})
    assert response.get_json() == {"success": True, "moved": False}

    response = admin_client.post(f"/admin/products/{second.id}/reorder", json={})
    assert response.status_code == 400


def test_products_api_lists_inactive_too(admin_client, make_product):
    make_product(name="On")
    make_product(name="Off", is_active=False)

    data = admin_client.get("/admin/products/api/products").get_json()

    assert sorted(p["name"] for p in data["products"]) == ["Off", "On"]
