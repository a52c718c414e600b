from models import db, utcnow


class AuthSession(db.Model):
    """Server-side session row, keyed by the id carried in the cookie."""
    __tablename__ = 'sessions'

    id = db.Column(db.Integer, primary_key=True)
    sid = db.Column(db.String(128), unique=True, nullable=False)
    data = db.Column(db.JSON, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
