from models import db, utcnow, isoformat


class ServiceItem(db.Model):
    __tablename__ = 'service_items'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    icon = db.Column(db.String(100)) # icon name understood by the front end
    order = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "order": self.order,
            "updatedAt": isoformat(self.updated_at),
        }
