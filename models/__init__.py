from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    # Naive UTC, matching what the DateTime columns hand back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None


# --- Import Models ---
from .User import User
from .ContactSubmission import ContactSubmission
from .SiteSetting import SiteSetting
from .SiteAsset import SiteAsset
from .HeroContent import HeroContent
from .AboutContent import AboutContent
from .ServiceItem import ServiceItem
from .ProductItem import ProductItem
from .TeamMember import TeamMember
from .TestimonialItem import TestimonialItem
from .PortfolioItem import PortfolioItem
from .FaqItem import FaqItem
from .AuthSession import AuthSession

# Content tables carrying an image_id reference to site_assets
IMAGE_REFERENCING_MODELS = (
    HeroContent,
    AboutContent,
    ProductItem,
    TeamMember,
    TestimonialItem,
    PortfolioItem,
)
