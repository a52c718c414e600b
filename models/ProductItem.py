from models import db, utcnow, isoformat


class ProductItem(db.Model):
    __tablename__ = 'product_items'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.String(50)) # free text, e.g. "$29/mo"
    features = db.Column(db.JSON, nullable=False, default=list)
    bg_color = db.Column(db.String(20), default='#ffffff')
    button_color = db.Column(db.String(20), default='#000000')
    image_id = db.Column(db.Integer, db.ForeignKey('site_assets.id'), nullable=True)
    order = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "features": self.features or [],
            "bgColor": self.bg_color,
            "buttonColor": self.button_color,
            "imageId": self.image_id,
            "order": self.order,
            "updatedAt": isoformat(self.updated_at),
        }
