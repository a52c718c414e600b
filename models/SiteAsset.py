from models import db, utcnow, isoformat


class SiteAsset(db.Model):
    __tablename__ = 'site_assets'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    section = db.Column(db.String(50), nullable=False, index=True) # e.g., "hero", "about"
    content_type = db.Column(db.String(100), nullable=False)
    data = db.Column(db.Text, nullable=False) # Base64 encoded payload
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def metadata_dict(self):
        """Everything except the base64 payload, for list responses."""
        return {
            "id": self.id,
            "name": self.name,
            "section": self.section,
            "contentType": self.content_type,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def to_dict(self):
        result = self.metadata_dict()
        result["data"] = self.data
        return result
