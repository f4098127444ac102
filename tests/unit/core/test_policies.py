from decimal import Decimal

from src.commerce.core.policies import can_mutate_product, has_any_role
from src.commerce.entities.service.product import Product, Visibility


def _product(**overrides) -> Product:
    values = {"name": "Widget", "price": Decimal("1.00"), "user_id": "owner"}
    values.update(overrides)
    return Product(**values)


class TestCanMutateProduct:
    def test_owner_may_mutate(self):
        assert can_mutate_product("owner", _product()) is True

    def test_other_user_may_not(self):
        assert can_mutate_product("intruder", _product()) is False

    def test_missing_product_or_actor(self):
        assert can_mutate_product("owner", None) is False
        assert can_mutate_product(None, _product()) is False
        assert can_mutate_product("", _product()) is False

    def test_soft_deleted_product_is_frozen_even_for_owner(self):
        assert can_mutate_product("owner", _product(visibility=Visibility.SOFT_DELETED)) is False


def test_has_any_role():
    assert has_any_role({"User"}, {"Admin", "User"})
    assert not has_any_role({"User"}, {"Admin"})
    assert not has_any_role(set(), {"Admin"})
