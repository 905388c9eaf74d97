from school_portal.extensions import db
from school_portal.models.admin import Admin


class AdminRepo:
    @staticmethod
    def get(admin_id: int):
        return db.session.get(Admin, admin_id)

    @staticmethod
    def get_by_email(email: str):
        return Admin.query.filter_by(email=email.lower()).first()

    @staticmethod
    def add(admin: Admin):
        db.session.add(admin)
        db.session.flush()
        return admin
