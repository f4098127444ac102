"""Unit tests for the product repository and its visibility filter."""

from decimal import Decimal

from src.commerce.entities.service.product import Product, ProductRepository, Visibility
from tests.utils import make_product


class TestProduct:
    """Test the Product domain entity."""

    def test_product_defaults(self):
        """A new product is visible and gets a fresh id."""
        product = Product(name="Widget", price=Decimal("10.99"), user_id="owner-1")

        assert product.id
        assert product.visibility is Visibility.ACTIVE
        assert product.is_deleted is False
        assert product.is_owned_by("owner-1")
        assert not product.is_owned_by("owner-2")

    def test_equality_ignores_timestamps(self):
        product = Product(id="p1", name="Widget", price=Decimal("1"), user_id="u1")
        later = product.model_copy(update={"updated_at": product.created_at})

        assert product == later
        assert hash(product) == hash(later)


class TestProductRepository:
    def test_create_and_get(self, session):
        created = make_product(session, "owner-1")

        fetched = ProductRepository(session).get(created.id)

        assert fetched is not None
        assert fetched.name == "Widget"
        assert fetched.price == Decimal("10.99")
        assert fetched.user_id == "owner-1"
        assert fetched.created_at is not None

    def test_get_missing_returns_none(self, session):
        assert ProductRepository(session).get("does-not-exist") is None

    def test_soft_deleted_products_are_hidden_from_reads(self, session):
        repo = ProductRepository(session)
        p1 = make_product(session, "owner-1", name="First")
        p2 = make_product(session, "owner-1", name="Second")

        assert repo.soft_delete_by_owner("owner-1") == 2
        session.commit()

        assert repo.get(p1.id) is None
        assert repo.get(p2.id) is None
        assert repo.list_all() == []
        assert repo.search(name="First") == []

    def test_soft_delete_is_idempotent(self, session):
        repo = ProductRepository(session)
        make_product(session, "owner-1")
        other = make_product(session, "owner-2")

        assert repo.soft_delete_by_owner("owner-1") == 1
        session.commit()
        visible_after_first = {p.id for p in repo.list_all()}

        assert repo.soft_delete_by_owner("owner-1") == 0
        session.commit()

        assert {p.id for p in repo.list_all()} == visible_after_first == {other.id}

    def test_bulk_operations_tolerate_unknown_owner(self, session):
        repo = ProductRepository(session)

        assert repo.soft_delete_by_owner("nobody") == 0
        assert repo.restore_by_owner("nobody") == 0

    def test_restore_brings_products_back_unchanged(self, session):
        repo = ProductRepository(session)
        p1 = make_product(session, "owner-1", name="First", price="100")
        p2 = make_product(session, "owner-1", name="Second", price="200", availability=False)
        repo.soft_delete_by_owner("owner-1")
        session.commit()

        assert repo.restore_by_owner("owner-1") == 2
        session.commit()

        restored = {p.id: p for p in repo.list_all()}
        assert restored.keys() == {p1.id, p2.id}
        assert restored[p1.id] == p1
        assert restored[p2.id] == p2
        assert all(not p.is_deleted for p in restored.values())

    def test_restore_only_touches_the_owner(self, session):
        repo = ProductRepository(session)
        make_product(session, "owner-1")
        make_product(session, "owner-2")
        repo.soft_delete_by_owner("owner-1")
        repo.soft_delete_by_owner("owner-2")
        session.commit()

        assert repo.restore_by_owner("owner-1") == 1
        session.commit()

        assert [p.user_id for p in repo.list_all()] == ["owner-1"]

    def test_bulk_change_is_rolled_back_as_a_unit(self, session):
        repo = ProductRepository(session)
        make_product(session, "owner-1", name="First")
        make_product(session, "owner-1", name="Second")

        repo.soft_delete_by_owner("owner-1")
        session.rollback()

        assert len(repo.list_all()) == 2

    def test_update_overwrites_fields(self, session):
        repo = ProductRepository(session)
        created = make_product(session, "owner-1")

        updated = repo.update(created.model_copy(update={"name": "Gadget", "price": Decimal("5.00")}))
        session.commit()

        assert updated.name == "Gadget"
        assert repo.get(created.id).price == Decimal("5.00")
        assert updated.updated_at is not None


class TestProductSearch:
    def test_price_range_and_availability(self, session):
        p1 = make_product(session, "u1", name="P1", price="100", availability=True)
        make_product(session, "u1", name="P2", price="200", availability=False)

        results = ProductRepository(session).search(
            min_price=Decimal("50"), max_price=Decimal("150"), availability=True
        )

        assert [p.id for p in results] == [p1.id]

    def test_name_is_a_case_insensitive_substring(self, session):
        make_product(session, "u1", name="Blue Widget")
        make_product(session, "u1", name="Red Gadget")

        results = ProductRepository(session).search(name="widg")

        assert [p.name for p in results] == ["Blue Widget"]

    def test_blank_name_is_ignored(self, session):
        make_product(session, "u1", name="Blue Widget")
        make_product(session, "u1", name="Red Gadget")

        assert len(ProductRepository(session).search(name="   ")) == 2

    def test_wildcards_in_name_match_literally(self, session):
        make_product(session, "u1", name="100% cotton")
        make_product(session, "u1", name="Wool blend")

        results = ProductRepository(session).search(name="%")

        assert [p.name for p in results] == ["100% cotton"]

    def test_no_filters_returns_all_visible(self, session):
        make_product(session, "u1", name="One")
        make_product(session, "u2", name="Two")

        assert len(ProductRepository(session).search()) == 2
