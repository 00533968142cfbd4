from schoolsync.extensions import db


ATTENDANCE_STATUSES = ("present", "absent", "late")


# ---------------- ATTENDANCE ---------------- #

class Attendance(db.Model):
    __tablename__ = "attendance"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False
    )

    subject_id = db.Column(
        db.Integer,
        db.ForeignKey("subjects.id"),
        nullable=False
    )

    class_level_id = db.Column(
        db.Integer,
        db.ForeignKey("class_levels.id"),
        nullable=False
    )

    date = db.Column(db.Date, nullable=False)

    status = db.Column(
        db.Enum(*ATTENDANCE_STATUSES, name="attendance_status"),
        nullable=False
    )

    marked_by = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False
    )

    notes = db.Column(db.Text)

    notification_sent = db.Column(db.Boolean, nullable=False, default=False)

    __table_args__ = (
        db.UniqueConstraint("user_id", "subject_id", "date"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "subject_id": self.subject_id,
            "class_level_id": self.class_level_id,
            "date": self.date.isoformat(),
            "status": self.status,
            "marked_by": self.marked_by,
            "notes": self.notes,
            "notification_sent": bool(self.notification_sent),
        }


# ---------------- EXAM RESULTS ---------------- #

class ExamResult(db.Model):
    __tablename__ = "exam_results"

    id = db.Column(db.Integer, primary_key=True)

    student_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False
    )

    subject_id = db.Column(
        db.Integer,
        db.ForeignKey("subjects.id"),
        nullable=False
    )

    academic_year = db.Column(db.Integer, nullable=False)

    term = db.Column(db.Integer, nullable=False)

    marks = db.Column(db.Integer, nullable=False)

    # A, B, C, D, F
    grade = db.Column(db.String(5), nullable=False)

    exam_date = db.Column(db.Date, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "subject_id": self.subject_id,
            "academic_year": self.academic_year,
            "term": self.term,
            "marks": self.marks,
            "grade": self.grade,
            "exam_date": self.exam_date.isoformat(),
        }
