from schoolsync.extensions import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash


ROLES = ("admin", "teacher", "student")


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(80), unique=True, nullable=False)

    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(
        db.Enum(*ROLES, name="user_role"),
        nullable=False
    )

    full_name = db.Column(db.String(150), nullable=False)

    email = db.Column(db.String(120), nullable=False)

    profile_picture = db.Column(db.String(255))

    current_class_id = db.Column(
        db.Integer,
        db.ForeignKey("class_levels.id")
    )

    # Current academic year for students
    academic_year = db.Column(db.Integer)

    # ------------------
    # Auth helpers
    # ------------------

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "full_name": self.full_name,
            "email": self.email,
            "profile_picture": self.profile_picture,
            "current_class_id": self.current_class_id,
            "academic_year": self.academic_year,
        }
