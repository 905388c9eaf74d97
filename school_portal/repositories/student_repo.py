from school_portal.extensions import db
from school_portal.models.student import Student


class StudentRepo:
    @staticmethod
    def get(student_id: int):
        return db.session.get(Student, student_id)

    @staticmethod
    def get_by_code(student_code: str):
        return Student.query.filter_by(student_code=student_code).first()

    @staticmethod
    def add(student: Student):
        db.session.add(student)
        db.session.flush()
        return student
