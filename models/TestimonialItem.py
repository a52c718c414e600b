from models import db, utcnow, isoformat


class TestimonialItem(db.Model):
    __tablename__ = 'testimonial_items'

    id = db.Column(db.Integer, primary_key=True)
    content = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(200), nullable=False)
    position = db.Column(db.String(200))
    company = db.Column(db.String(200))
    image_id = db.Column(db.Integer, db.ForeignKey('site_assets.id'), nullable=True)
    order = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "content": self.content,
            "author": self.author,
            "position": self.position,
            "company": self.company,
            "imageId": self.image_id,
            "order": self.order,
            "updatedAt": isoformat(self.updated_at),
        }
