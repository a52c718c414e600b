from models import db, utcnow, isoformat


class PortfolioItem(db.Model):
    __tablename__ = 'portfolio_items'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(100))
    image_id = db.Column(db.Integer, db.ForeignKey('site_assets.id'), nullable=True)
    order = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "imageId": self.image_id,
            "order": self.order,
            "updatedAt": isoformat(self.updated_at),
        }
