import pytest

from fakes import InMemoryCartRepository, InMemoryCatalogueRepository
from routers.cart.schemas import CartUpdate
from routers.cart.service import CartService
from routers.products.schemas import CategoryCreate, ProductCreate
from routers.products.service import CatalogueService
from utils.errors import NotFoundError, ValidationError

BUYER_ID = 7


@pytest.fixture
def catalogue():
    return InMemoryCatalogueRepository()


@pytest.fixture
def cart_repo():
    return InMemoryCartRepository()


@pytest.fixture
def service(cart_repo, catalogue):
    return CartService(cart_repo, catalogue)


@pytest.fixture
async def product(catalogue):
    catalogue_service = CatalogueService(catalogue)
    category = await catalogue_service.create_category(1, CategoryCreate(name="Electronics"))
    return await catalogue_service.create_product(
        1, ProductCreate(name="Phone", price=500, category_id=category.id, stock=10, image_url="http://img/p.png")
    )


async def test_add_snapshots_product(service, product):
    item = await service.add_to_cart(BUYER_ID, product.id)

    assert item.quantity == 1
    assert (item.name, item.price, item.image_url, item.seller_id) == ("Phone", 500, "http://img/p.png", 1)


async def test_repeat_add_merges_into_one_line(service, cart_repo, product):
    await service.add_to_cart(BUYER_ID, product.id, 2)
    product.price = 650
    item = await service.add_to_cart(BUYER_ID, product.id, 3)

    assert item.quantity == 5
    assert item.price == 500
    assert len(await service.list_items(BUYER_ID)) == 1


async def test_add_unknown_product(service):
    with pytest.raises(NotFoundError):
        await service.add_to_cart(BUYER_ID, 999)


async def test_add_rejects_zero_quantity(service, product):
    with pytest.raises(ValidationError):
        await service.add_to_cart(BUYER_ID, product.id, 0)


async def test_decrement_floor(service, product):
    await service.add_to_cart(BUYER_ID, product.id)

    with pytest.raises(ValidationError, match="delete the item instead"):
        await service.decrement(BUYER_ID, product.id)
    assert (await service.get_item(BUYER_ID, product.id)).quantity == 1


async def test_increment_then_decrement(service, product):
    await service.add_to_cart(BUYER_ID, product.id)

    assert (await service.increment(BUYER_ID, product.id)).quantity == 2
    assert (await service.decrement(BUYER_ID, product.id)).quantity == 1


async def test_increment_missing_line(service):
    with pytest.raises(NotFoundError):
        await service.increment(BUYER_ID, 1)


async def test_update_requires_product_id(service):
    with pytest.raises(ValidationError, match="product id is required"):
        await service.update_cart(BUYER_ID, CartUpdate(quantity=2))


async def test_update_overrides_quantity_and_price(service, product):
    await service.add_to_cart(BUYER_ID, product.id)

    item = await service.update_cart(BUYER_ID, CartUpdate(product_id=product.id, quantity=4, price=450))
    assert (item.quantity, item.price) == (4, 450)


async def test_update_missing_line(service, product):
    with pytest.raises(NotFoundError):
        await service.update_cart(BUYER_ID, CartUpdate(product_id=product.id, quantity=2))


async def test_delete_single_line_reports_missing(service, product):
    await service.add_to_cart(BUYER_ID, product.id)
    await service.delete_item(BUYER_ID, product.id)

    with pytest.raises(NotFoundError):
        await service.delete_item(BUYER_ID, product.id)


async def test_clear_is_idempotent(service, product):
    await service.add_to_cart(BUYER_ID, product.id)

    await service.clear(BUYER_ID)
    await service.clear(BUYER_ID)
    assert await service.list_items(BUYER_ID) == []


async def test_carts_are_per_user(service, product):
    await service.add_to_cart(BUYER_ID, product.id)

    assert await service.list_items(BUYER_ID + 1) == []
    with pytest.raises(NotFoundError):
        await service.get_item(BUYER_ID + 1, product.id)
