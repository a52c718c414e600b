from models import db, utcnow, isoformat


class TeamMember(db.Model):
    __tablename__ = 'team_members'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(200), nullable=False)
    bio = db.Column(db.Text)
    # {"linkedin": "...", "twitter": "...", "github": "...", "email": "..."}
    social_links = db.Column(db.JSON)
    image_id = db.Column(db.Integer, db.ForeignKey('site_assets.id'), nullable=True)
    order = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "bio": self.bio,
            "socialLinks": self.social_links or {},
            "imageId": self.image_id,
            "order": self.order,
            "updatedAt": isoformat(self.updated_at),
        }
