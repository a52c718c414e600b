from models import db, utcnow, isoformat

DEFAULT_ABOUT_TITLE = "About Our Company"


class AboutContent(db.Model):
    __tablename__ = 'about_content'
    __table_args__ = (db.CheckConstraint('slot = 1', name='ck_about_content_single_slot'),)

    id = db.Column(db.Integer, primary_key=True)
    slot = db.Column(db.Integer, nullable=False, unique=True, default=1)
    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.String(255))
    description = db.Column(db.Text)
    content = db.Column(db.Text)
    image_id = db.Column(db.Integer, db.ForeignKey('site_assets.id'), nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "content": self.content,
            "imageId": self.image_id,
            "updatedAt": isoformat(self.updated_at),
        }
