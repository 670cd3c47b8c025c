"""Application tests for the product catalogue."""

import pytest
from mediquick.product.creation import AddProduct, search_products
from mediquick.product.product import Product
from mediquick.shared.errors import Unauthorized
from protean import current_domain
from protean.exceptions import InvalidDataError


def test_admin_adds_product(product):
    stored = current_domain.repository_for(Product).get(product)
    assert stored.name == "Paracetamol 500mg"
    assert stored.price == 10.0
    assert stored.coins_assigned == 5


def test_non_admin_cannot_add_product(customer):
    with pytest.raises(Unauthorized):
        current_domain.process(AddProduct(admin_id=customer, name="Aspirin", price=3.0), asynchronous=False)


def test_negative_price_rejected_when_building_the_command(admin):
    with pytest.raises(InvalidDataError) as exc:
        AddProduct(admin_id=admin, name="Aspirin", price=-1.0)
    assert "price" in exc.value.messages
    assert search_products() == []


def test_search_by_name_is_case_insensitive(product, free_product):
    assert [p.name for p in search_products("MASK")] == ["Face Mask"]
    assert [p.name for p in search_products()] == ["Face Mask", "Paracetamol 500mg"]


def test_catalogue_lists_more_than_a_hundred_products(admin):
    repo = current_domain.repository_for(Product)
    for number in range(105):
        repo.add(Product.add(name=f"Generic {number:03d}", price=1.0))

    products = search_products()
    assert len(products) == 105
    assert products[-1].name == "Generic 104"
