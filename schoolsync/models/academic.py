from schoolsync.extensions import db


PROMOTION_STATUSES = ("pending", "promoted", "retained")


# ---------------- CLASS LEVELS ---------------- #

class ClassLevel(db.Model):
    __tablename__ = "class_levels"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(100), nullable=False)

    description = db.Column(db.Text)

    academic_year = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "academic_year": self.academic_year,
        }


# ---------------- STUDENT ACADEMICS ---------------- #

class StudentAcademics(db.Model):
    __tablename__ = "student_academics"

    id = db.Column(db.Integer, primary_key=True)

    student_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False
    )

    class_level_id = db.Column(
        db.Integer,
        db.ForeignKey("class_levels.id"),
        nullable=False
    )

    academic_year = db.Column(db.Integer, nullable=False)

    # A, B, C, D, F
    overall_grade = db.Column(db.String(5))

    promotion_status = db.Column(
        db.Enum(*PROMOTION_STATUSES, name="promotion_status"),
        nullable=False,
        default="pending"
    )

    remarks = db.Column(db.Text)

    __table_args__ = (
        db.UniqueConstraint("student_id", "academic_year"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "class_level_id": self.class_level_id,
            "academic_year": self.academic_year,
            "overall_grade": self.overall_grade,
            "promotion_status": self.promotion_status,
            "remarks": self.remarks,
        }


# ---------------- SUBJECTS ---------------- #

class Subject(db.Model):
    __tablename__ = "subjects"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(100), nullable=False)

    description = db.Column(db.Text)

    teacher_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id")
    )

    class_level_id = db.Column(
        db.Integer,
        db.ForeignKey("class_levels.id"),
        nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "teacher_id": self.teacher_id,
            "class_level_id": self.class_level_id,
        }
