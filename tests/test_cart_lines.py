from decimal import Decimal

import pytest

from kasir.core.drafts import add_line, has_line, remove_line, set_line_quantity
from kasir.models.products import Product


@pytest.fixture
def espresso():
    return Product(
        id=1,
        name="Espresso",
        price=Decimal("25000.00"),
        category="Kopi",
        barcodes=["CF-001"],
        stock=100,
        image="",
    )


@pytest.fixture
def latte():
    return Product(
        id=2,
        name="Latte",
        price=Decimal("35000.00"),
        category="Kopi",
        barcodes=["CF-002"],
        stock=100,
        image="",
    )


def test_add_new_product_appends_single_unit(espresso):
    items = add_line([], espresso)

    assert len(items) == 1
    assert items[0]["id"] == 1
    assert items[0]["quantity"] == 1
    assert items[0]["price"] == "25000.00"


def test_add_existing_product_increments_quantity(espresso, latte):
    items = add_line(add_line([], espresso), latte)
    items = add_line(items, espresso)

    assert [line["id"] for line in items] == [1, 2]
    assert items[0]["quantity"] == 2
    assert items[1]["quantity"] == 1


def test_add_does_not_mutate_input(espresso):
    original = add_line([], espresso)
    add_line(original, espresso)

    assert original[0]["quantity"] == 1


@pytest.mark.parametrize("quantity", [0, -1, -5])
def test_non_positive_quantity_removes_line(espresso, latte, quantity):
    items = add_line(add_line([], espresso), latte)

    items = set_line_quantity(items, 1, quantity)

    assert not has_line(items, 1)
    assert [line["id"] for line in items] == [2]


def test_positive_quantity_replaces(espresso):
    items = set_line_quantity(add_line([], espresso), 1, 7)

    assert items[0]["quantity"] == 7


def test_remove_line(espresso, latte):
    items = add_line(add_line([], espresso), latte)

    assert remove_line(items, 2) == [items[0]]
    assert remove_line(items, 99) == items
