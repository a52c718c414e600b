from models import db, utcnow, isoformat

# Advisory only, values are always stored as text
SETTING_TYPES = ('text', 'number', 'boolean', 'json')


class SiteSetting(db.Model):
    __tablename__ = 'site_settings'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False) # e.g., "site_name"
    value = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(20), nullable=False, default='text')
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "type": self.type,
            "updatedAt": isoformat(self.updated_at),
        }
