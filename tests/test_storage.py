import logging

from sqlalchemy import func, select

from models import db, HeroContent, SiteSetting, ServiceItem, ProductItem, TeamMember, User
from storage import storage, _lock_statement


def test_collection_lists_ascending_by_order(ctx):
    storage.services.create({"title": "Third", "order": 5})
    storage.services.create({"title": "First", "order": 1})
    storage.services.create({"title": "Second", "order": 3})

    assert [s.title for s in storage.services.list()] == ["First", "Second", "Third"]


def test_create_without_order_appends_after_max(ctx):
    first = storage.faq.create({"question": "Q1", "answer": "A1"})
    assert first.order == 1

    storage.faq.create({"question": "Q2", "answer": "A2", "order": 10})
    appended = storage.faq.create({"question": "Q3", "answer": "A3"})

    assert appended.order == 11
    assert [f.question for f in storage.faq.list()] == ["Q1", "Q2", "Q3"]


def test_explicit_zero_order_is_kept(ctx):
    item = storage.portfolio.create({"title": "Pinned", "order": 0})
    assert item.order == 0


def test_duplicate_orders_sort_by_insertion(ctx):
    # Same outcome as two concurrent creates computing the same next order
    a = storage.testimonials.create({"content": "Great", "author": "A", "order": 2})
    b = storage.testimonials.create({"content": "Good", "author": "B", "order": 2})
    c = storage.testimonials.create({"content": "Fine", "author": "C", "order": 1})

    assert [t.id for t in storage.testimonials.list()] == [c.id, a.id, b.id]


def test_update_merges_fields_and_refreshes_timestamp(ctx):
    item = storage.services.create({"title": "Design", "description": "Old"})
    before = item.updated_at

    updated = storage.services.update(item.id, {"description": "New"})

    assert updated.title == "Design"
    assert updated.description == "New"
    assert updated.updated_at >= before


def test_update_missing_item_returns_none(ctx):
    assert storage.products.update(999, {"name": "Ghost"}) is None


def test_delete_is_idempotent(ctx):
    item = storage.team.create({"name": "Ann", "role": "CEO"})
    storage.team.delete(item.id)
    storage.team.delete(item.id)
    storage.team.delete(12345)

    assert storage.team.list() == []


def test_product_and_team_json_columns(ctx):
    product = storage.products.create({"name": "Pro", "features": ["Fast", "Secure"]})
    member = storage.team.create({"name": "Bo", "role": "CTO", "social_links": {"github": "bo"}})

    assert db.session.get(ProductItem, product.id).features == ["Fast", "Secure"]
    assert db.session.get(TeamMember, member.id).social_links == {"github": "bo"}
    assert product.to_dict()["bgColor"] == "#ffffff"


def test_set_site_setting_twice_leaves_one_row(ctx):
    storage.set_site_setting("site_name", "Letterly", "text")
    storage.set_site_setting("site_name", "Letterly", "text")

    count = db.session.execute(
        select(func.count(SiteSetting.id)).where(SiteSetting.key == "site_name")
    ).scalar_one()
    assert count == 1
    assert storage.get_site_setting("site_name").value == "Letterly"


def test_set_site_setting_overwrites_value_and_type(ctx):
    storage.set_site_setting("max_items", "5", "number")
    setting = storage.set_site_setting("max_items", "true", "boolean")

    assert setting.value == "true"
    assert setting.type == "boolean"
    assert storage.get_site_setting("missing") is None


def test_hero_upsert_keeps_single_row(ctx):
    assert storage.get_hero_content() is None

    created = storage.update_hero_content({"subtitle": "Write better"})
    assert created.title == "Welcome to Our Company"

    for i in range(3):
        storage.update_hero_content({"title": f"Title {i}"})
    hero = storage.update_hero_content({"button_text": "Start"})

    assert db.session.execute(select(func.count(HeroContent.id))).scalar_one() == 1
    assert hero.title == "Title 2"
    assert hero.subtitle == "Write better"
    assert hero.button_text == "Start"


def test_about_upsert_default_title(ctx):
    about = storage.update_about_content({"content": "Our story"})
    assert about.title == "About Our Company"
    assert storage.get_about_content().content == "Our story"


def test_validate_user_password_outcomes_are_indistinguishable(ctx):
    storage.create_user("editor", "correct-horse")

    assert storage.validate_user_password("nobody", "correct-horse") is None
    assert storage.validate_user_password("editor", "wrong") is None
    assert storage.validate_user_password("editor", "correct-horse").username == "editor"


def test_password_is_hashed_at_rest(ctx):
    user = storage.create_user("editor", "correct-horse")
    assert user.password_hash != "correct-horse"
    assert "password_hash" not in user.to_dict()


def test_register_first_admin_only_once(ctx):
    first = storage.register_first_admin("owner", "secret1", email="o@letterly.io")
    assert first.role == "admin"

    assert storage.register_first_admin("intruder", "secret2") is None
    assert storage.count_users() == 1


def test_delete_site_asset_clears_references(ctx):
    asset = storage.create_site_asset(
        {"name": "hero.png", "section": "hero", "content_type": "image/png", "data": "aGVsbG8="}
    )
    storage.update_hero_content({"image_id": asset.id})
    product = storage.products.create({"name": "Pro", "image_id": asset.id})

    storage.delete_site_asset(asset.id)

    assert storage.get_site_asset(asset.id) is None
    assert storage.get_hero_content().image_id is None
    assert storage.products.get(product.id).image_id is None


def test_assets_filtered_by_section(ctx):
    storage.create_site_asset({"name": "a", "section": "hero", "content_type": "image/png", "data": "YQ=="})
    storage.create_site_asset({"name": "b", "section": "about", "content_type": "image/png", "data": "Yg=="})

    assert [a.name for a in storage.get_site_assets_by_section("hero")] == ["a"]
    assert storage.get_site_assets_by_section("team") == []


def test_update_site_asset(ctx):
    asset = storage.create_site_asset({"name": "a", "section": "hero", "content_type": "image/png", "data": "YQ=="})
    assert storage.update_site_asset(asset.id, {"name": "renamed"}).name == "renamed"
    assert storage.update_site_asset(999, {"name": "x"}) is None


def test_contact_submissions_newest_first(ctx):
    first = storage.create_contact_submission(
        {"name": "A", "email": "a@b.com", "subject": "S", "message": "M", "terms": True}
    )
    second = storage.create_contact_submission(
        {"name": "B", "email": "b@b.com", "subject": "S2", "message": "M2", "terms": True}
    )

    ids = [s.id for s in storage.get_all_contact_submissions()]
    assert ids == [second.id, first.id]
    assert storage.get_contact_submission(first.id).name == "A"
    assert storage.get_contact_submission(999) is None


def test_collections_registry_covers_all_content_types(ctx):
    assert set(storage.collections()) == {
        "services", "products", "team", "testimonials", "portfolio", "faq"
    }
    assert storage.collection("services").model is ServiceItem


def test_upsert_fallback_for_dialects_without_on_conflict(ctx, monkeypatch):
    monkeypatch.setattr("storage._UPSERT_DIALECTS", {})

    storage.set_site_setting("site_name", "Letterly", "text")
    setting = storage.set_site_setting("site_name", "Letterly HQ", "text")
    assert setting.value == "Letterly HQ"
    assert db.session.execute(select(func.count(SiteSetting.id))).scalar_one() == 1

    storage.update_hero_content({"subtitle": "Plain text newsletters"})
    hero = storage.update_hero_content({"title": "Hello"})
    assert (hero.title, hero.subtitle) == ("Hello", "Plain text newsletters")
    assert db.session.execute(select(func.count(HeroContent.id))).scalar_one() == 1


def test_unknown_setting_type_is_stored_with_a_warning(ctx, caplog):
    with caplog.at_level(logging.WARNING, logger="storage"):
        setting = storage.set_site_setting("accent", "#ff0066", "colour")

    assert setting.type == "colour"
    assert "unknown type 'colour'" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="storage"):
        storage.set_site_setting("max_items", "5", "number")
    assert caplog.text == ""


def test_first_admin_registration_locks_users_table_on_postgresql():
    lock = _lock_statement("postgresql", User.__table__)
    assert str(lock) == "LOCK TABLE users IN SHARE ROW EXCLUSIVE MODE"
    assert _lock_statement("sqlite", User.__table__) is None


def test_get_user_and_get_all_users(ctx):
    owner = storage.register_first_admin("owner", "secret1")
    viewer = storage.create_user("viewer", "secret2")

    assert storage.get_user(viewer.id).username == "viewer"
    assert storage.get_user(9999) is None
    assert [u.username for u in storage.get_all_users()] == ["owner", "viewer"]
    assert storage.get_user(owner.id).role == "admin"
