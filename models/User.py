from models import db, utcnow, isoformat
from werkzeug.security import generate_password_hash, check_password_hash

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)
    email = db.Column(db.String(120))
    full_name = db.Column(db.String(100))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    # Hash password before storing
    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    # Check if a password matches the stored hash
    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def session_identity(self):
        return {"id": self.id, "username": self.username, "role": self.role}

    def to_dict(self):
        # Never expose password_hash
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "email": self.email,
            "fullName": self.full_name,
            "createdAt": isoformat(self.created_at),
        }
