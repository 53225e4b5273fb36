"""
The per-file fixture lifecycle: provision once, purge after every test,
tear down at the end.

Tests in this module run in order and rely on state left by the previous
test being purged.
"""

import pytest

from storecheck.store.models import Brand, Category, Product, User

pytestmark = pytest.mark.integration

_seen: dict[str, object] = {}


class TestPerFileDatabase:
    def test_seed_everything(self, harness, seed):
        _seen["uri"] = harness.db.uri
        _seen["app"] = harness.app
        seed.catalog()
        seed.admin()
        assert seed.count(Product) == 1
        assert seed.count(User) == 1

    def test_tables_empty_after_previous_test(self, seed):
        for model in (User, Brand, Category, Product):
            assert seed.count(model) == 0

    def test_database_and_app_shared_within_file(self, harness):
        assert harness.db.uri == _seen["uri"]
        assert harness.app is _seen["app"]
        assert harness.db.is_connected

    def test_failing_test_still_cleaned(self, seed):
        seed.product()
        pytest.xfail("simulated failure after seeding")

    def test_tables_empty_after_failed_test(self, seed):
        assert seed.count(Product) == 0


class TestCleanup:
    def test_cleanup_result_counts_rows(self, harness, seed):
        seed.catalog()
        result = harness.cleanup()
        assert result.ok
        assert result.purged["products"] == 1
        assert result.purged["brands"] == 1
        assert result.purged["categories"] == 1
        assert result.rows == 3


class TestSeeder:
    def test_entities_are_independent(self, seed):
        first, second = seed.product(), seed.product()
        assert first.sku != second.sku
        assert first.slug != second.slug
        assert first.brand.id != second.brand.id

    def test_same_name_gets_unique_slug(self, seed):
        slugs = [seed.brand(name="Acme").slug for _ in range(3)]
        assert slugs == ["acme", "acme-2", "acme-3"]

    def test_admin_is_a_singleton(self, seed):
        admin = seed.admin()
        assert seed.admin().id == admin.id
        assert seed.count(User) == 1
        assert admin.role.value == "admin"

    def test_admin_uses_configured_credentials(self, harness, seed):
        admin = seed.admin()
        assert admin.email == harness.cfg.credentials.email
        assert seed.password_for(admin.email) == harness.cfg.credentials.password

    def test_passwords_are_hashed(self, seed):
        user = seed.user(password="plain-text")
        assert user.password != "plain-text"
        assert user.password.startswith("pbkdf2_sha256$")

    def test_password_for_unknown_user(self, seed):
        with pytest.raises(KeyError):
            seed.password_for("nobody@example.com")

    def test_product_recorded_on_category(self, seed):
        category = seed.category()
        first = seed.product(category=category)
        second = seed.product(category=category)
        assert sorted(second.category.product_ids) == [first.id, second.id]

    def test_entities_readable_after_session(self, seed):
        product = seed.product(name="Detached")
        assert product.name == "Detached"
        assert product.category.name.startswith("Category")
