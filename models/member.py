from models import db, BIGINT
from datetime import datetime


class Member(db.Model):
    __tablename__ = "member"

    id = db.Column(BIGINT, primary_key=True)
    phone = db.Column(db.String(15), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=True)
    role = db.Column(db.String(20), default="member")  # member, admin
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "role": self.role}

    def __repr__(self):
        return f"<Member id={self.id} role={self.role}>"
