"""
Storage access layer.

Every query against the database goes through the ``Storage`` object defined
here; route handlers never touch ``db.session`` directly. Missing rows come
back as ``None``; database errors propagate after the session is rolled back.
"""
import logging

from sqlalchemy import delete, func, insert, literal, select, text, update
from sqlalchemy.dialects import postgresql, sqlite
from werkzeug.security import generate_password_hash, check_password_hash

from models import (
    db, utcnow, IMAGE_REFERENCING_MODELS,
    User, ContactSubmission, SiteSetting, SiteAsset,
    HeroContent, AboutContent,
    ServiceItem, ProductItem, TeamMember, TestimonialItem, PortfolioItem, FaqItem,
)
from models.User import ROLE_ADMIN, ROLE_USER
from models.SiteSetting import SETTING_TYPES
from models.HeroContent import DEFAULT_HERO_TITLE
from models.AboutContent import DEFAULT_ABOUT_TITLE

logger = logging.getLogger(__name__)

# Compared against when the username is unknown so both failure paths cost a hash check
_DUMMY_PASSWORD_HASH = generate_password_hash("letterly-dummy-password")

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


# Where INSERT ... SELECT alone does not keep first-admin registration to one winner
_TABLE_LOCKS = {
    "postgresql": "LOCK TABLE {table} IN SHARE ROW EXCLUSIVE MODE",
}


def _lock_statement(dialect_name, table):
    template = _TABLE_LOCKS.get(dialect_name)
    if template is None:
        return None
    return text(template.format(table=table.name))


def _upsert(model, conflict_column, insert_values, update_values):
    """INSERT ... ON CONFLICT DO UPDATE where the dialect supports it."""
    dialect_insert = _UPSERT_DIALECTS.get(db.session.get_bind().dialect.name)
    if dialect_insert is None:
        # Read-then-write for dialects without an upsert clause
        row = db.session.execute(
            select(model).where(conflict_column == insert_values[conflict_column.key])
        ).scalar_one_or_none()
        if row is None:
            db.session.add(model(**insert_values))
        else:
            for field, value in update_values.items():
                setattr(row, field, value)
        _commit()
        return

    stmt = dialect_insert(model.__table__).values(**insert_values)
    stmt = stmt.on_conflict_do_update(index_elements=[conflict_column.key], set_=update_values)
    try:
        db.session.execute(stmt)
    except Exception:
        db.session.rollback()
        raise
    _commit()


class OrderedCollection:
    """One display-ordered content table (services, products, team, ...)."""

    def __init__(self, model):
        self.model = model

    def list(self):
        model = self.model
        stmt = select(model).order_by(model.order.asc(), model.id.asc())
        return db.session.execute(stmt).scalars().all()

    def get(self, item_id):
        return db.session.get(self.model, item_id)

    def next_order_expression(self):
        return select(func.coalesce(func.max(self.model.order), 0) + 1).scalar_subquery()

    def create(self, fields):
        values = dict(fields)
        item = self.model(**values)
        if values.get("order") is None:
            # Evaluated inside the INSERT, not read beforehand
            item.order = self.next_order_expression()
        db.session.add(item)
        _commit()
        return item

    def update(self, item_id, fields):
        item = self.get(item_id)
        if item is None:
            return None
        for field, value in fields.items():
            setattr(item, field, value)
        item.updated_at = utcnow()
        _commit()
        return item

    def delete(self, item_id):
        try:
            db.session.execute(delete(self.model).where(self.model.id == item_id))
        except Exception:
            db.session.rollback()
            raise
        _commit()


class Storage:
    def __init__(self):
        self.services = OrderedCollection(ServiceItem)
        self.products = OrderedCollection(ProductItem)
        self.team = OrderedCollection(TeamMember)
        self.testimonials = OrderedCollection(TestimonialItem)
        self.portfolio = OrderedCollection(PortfolioItem)
        self.faq = OrderedCollection(FaqItem)

    def collection(self, name):
        return self.collections()[name]

    def collections(self):
        return {
            "services": self.services,
            "products": self.products,
            "team": self.team,
            "testimonials": self.testimonials,
            "portfolio": self.portfolio,
            "faq": self.faq,
        }

    ## USERS ##

    def get_user(self, user_id):
        return db.session.get(User, user_id)

    def get_user_by_username(self, username):
        return db.session.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

    def get_all_users(self):
        return db.session.execute(select(User).order_by(User.id)).scalars().all()

    def count_users(self):
        return db.session.execute(select(func.count(User.id))).scalar_one()

    def create_user(self, username, password, role=ROLE_USER, email=None, full_name=None):
        user = User(username=username, role=role, email=email, full_name=full_name)
        user.set_password(password)
        db.session.add(user)
        _commit()
        return user

    def register_first_admin(self, username, password, email=None, full_name=None):
        """
        Create the first account as an admin, in a single statement that only
        inserts while the users table is empty. Returns None once any user exists.
        On PostgreSQL the users table is locked until commit, so two concurrent
        registrations cannot both see it empty.
        """
        lock = _lock_statement(db.session.get_bind().dialect.name, User.__table__)
        row = select(
            literal(username, db.String),
            literal(generate_password_hash(password), db.String),
            literal(ROLE_ADMIN, db.String),
            literal(email, db.String),
            literal(full_name, db.String),
            literal(utcnow(), db.DateTime),
        ).where(~select(User.id).correlate(None).exists())
        stmt = insert(User.__table__).from_select(
            ["username", "password_hash", "role", "email", "full_name", "created_at"], row
        )
        try:
            if lock is not None:
                db.session.execute(lock)
            result = db.session.execute(stmt)
        except Exception:
            db.session.rollback()
            raise
        _commit()
        if result.rowcount != 1:
            return None
        logger.info("Registered first admin account %r", username)
        return self.get_user_by_username(username)

    def validate_user_password(self, username, password):
        """
        Return the user when the credentials match, else None. An unknown
        username and a wrong password are indistinguishable to the caller.
        """
        user = self.get_user_by_username(username)
        if user is None:
            check_password_hash(_DUMMY_PASSWORD_HASH, password)
            return None
        if not user.check_password(password):
            return None
        return user

    ## CONTACT SUBMISSIONS ##

    def create_contact_submission(self, fields):
        submission = ContactSubmission(**fields)
        db.session.add(submission)
        _commit()
        return submission

    def get_all_contact_submissions(self):
        stmt = select(ContactSubmission).order_by(
            ContactSubmission.created_at.desc(), ContactSubmission.id.desc()
        )
        return db.session.execute(stmt).scalars().all()

    def get_contact_submission(self, submission_id):
        return db.session.get(ContactSubmission, submission_id)

    ## SITE SETTINGS ##

    def get_site_setting(self, key):
        return db.session.execute(
            select(SiteSetting).where(SiteSetting.key == key)
        ).scalar_one_or_none()

    def get_all_site_settings(self):
        return db.session.execute(select(SiteSetting).order_by(SiteSetting.key)).scalars().all()

    def set_site_setting(self, key, value, type="text"):
        if type not in SETTING_TYPES:
            logger.warning("Site setting %r saved with unknown type %r", key, type)
        now = utcnow()
        _upsert(
            SiteSetting,
            SiteSetting.key,
            {"key": key, "value": value, "type": type, "updated_at": now},
            {"value": value, "type": type, "updated_at": now},
        )
        logger.debug("Site setting %r set (%s)", key, type)
        db.session.expire_all()
        return self.get_site_setting(key)

    ## SITE ASSETS ##

    def create_site_asset(self, fields):
        asset = SiteAsset(**fields)
        db.session.add(asset)
        _commit()
        return asset

    def get_site_asset(self, asset_id):
        return db.session.get(SiteAsset, asset_id)

    def get_site_assets_by_section(self, section):
        stmt = select(SiteAsset).where(SiteAsset.section == section).order_by(SiteAsset.id)
        return db.session.execute(stmt).scalars().all()

    def update_site_asset(self, asset_id, fields):
        asset = self.get_site_asset(asset_id)
        if asset is None:
            return None
        for field, value in fields.items():
            setattr(asset, field, value)
        asset.updated_at = utcnow()
        _commit()
        return asset

    def delete_site_asset(self, asset_id):
        """Delete an asset, first clearing any content row that points at it."""
        try:
            cleared = 0
            for model in IMAGE_REFERENCING_MODELS:
                result = db.session.execute(
                    update(model).where(model.image_id == asset_id).values(image_id=None)
                )
                cleared += result.rowcount or 0
            db.session.execute(delete(SiteAsset).where(SiteAsset.id == asset_id))
        except Exception:
            db.session.rollback()
            raise
        _commit()
        if cleared:
            logger.info("Cleared %d image reference(s) to deleted asset %s", cleared, asset_id)

    ## SINGLETON CONTENT ##

    def _update_singleton(self, model, fields, defaults):
        now = utcnow()
        insert_values = {**defaults, **fields, "slot": 1, "updated_at": now}
        _upsert(model, model.slot, insert_values, {**fields, "updated_at": now})
        db.session.expire_all()
        return db.session.execute(select(model)).scalar_one()

    def get_hero_content(self):
        return db.session.execute(select(HeroContent)).scalars().first()

    def update_hero_content(self, fields):
        return self._update_singleton(HeroContent, fields, {"title": DEFAULT_HERO_TITLE})

    def get_about_content(self):
        return db.session.execute(select(AboutContent)).scalars().first()

    def update_about_content(self, fields):
        return self._update_singleton(AboutContent, fields, {"title": DEFAULT_ABOUT_TITLE})


storage = Storage()
