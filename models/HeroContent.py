from models import db, utcnow, isoformat

DEFAULT_HERO_TITLE = "Welcome to Our Company"


class HeroContent(db.Model):
    __tablename__ = 'hero_content'
    __table_args__ = (db.CheckConstraint('slot = 1', name='ck_hero_content_single_slot'),)

    id = db.Column(db.Integer, primary_key=True)
    # Unique and pinned to 1, so the table can only ever hold one row
    slot = db.Column(db.Integer, nullable=False, unique=True, default=1)
    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.String(255))
    description = db.Column(db.Text)
    button_text = db.Column(db.String(100))
    button_link = db.Column(db.String(255))
    image_id = db.Column(db.Integer, db.ForeignKey('site_assets.id'), nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "buttonText": self.button_text,
            "buttonLink": self.button_link,
            "imageId": self.image_id,
            "updatedAt": isoformat(self.updated_at),
        }
