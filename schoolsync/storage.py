import logging
from contextlib import contextmanager

from sqlalchemy import extract, func
from sqlalchemy.exc import IntegrityError

from schoolsync.errors import ConflictError, NotFound
from schoolsync.models import (
    Announcement,
    Attendance,
    AttendanceStats,
    ClassLevel,
    ExamResult,
    Material,
    StudentAcademics,
    Subject,
    User
)


logger = logging.getLogger(__name__)


class Storage:
    """
    Entity reads and writes over an explicitly supplied SQLAlchemy session.

    Writes commit straight away unless they run inside ``transaction()``, in
    which case the outermost block decides whether everything commits or
    everything is rolled back.
    """

    def __init__(self, session):
        self.session = session
        self._depth = 0

    @contextmanager
    def transaction(self):
        self._depth += 1
        try:
            yield self
            if self._depth == 1:
                self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Integrity error: %s", e.orig)
            raise ConflictError() from e
        except Exception:
            self.session.rollback()
            raise
        finally:
            self._depth -= 1

    # ------------------
    # Generic helpers
    # ------------------

    def _get(self, model, id):
        return self.session.get(model, id)

    def _get_or_404(self, model, id):
        record = self._get(model, id)
        if record is None:
            raise NotFound(f"{model.__name__} {id} not found")
        return record

    def _list(self, model, *criteria, order_by=None):
        query = self.session.query(model).filter(*criteria)
        return query.order_by(order_by if order_by is not None else model.id).all()

    def _create(self, model, **fields):
        fields.pop("id", None)
        record = model(**fields)
        with self.transaction():
            self.session.add(record)
            self.session.flush()
        return record

    def _update(self, model, id, /, **fields):
        fields.pop("id", None)
        record = self._get_or_404(model, id)
        with self.transaction():
            for name, value in fields.items():
                setattr(record, name, value)
            self.session.flush()
        return record

    def _delete(self, model, id):
        record = self._get_or_404(model, id)
        with self.transaction():
            self.session.delete(record)
            self.session.flush()

    # ---------------- USERS ---------------- #

    def get_user(self, id):
        return self._get(User, id)

    def get_user_by_username(self, username):
        return (
            self.session.query(User)
            .filter(func.lower(User.username) == username.lower())
            .first()
        )

    def list_users(self):
        return self._list(User)

    def list_users_by_role(self, role):
        return self._list(User, User.role == role)

    def list_users_by_class(self, class_id, role="student"):
        return self._list(
            User,
            User.current_class_id == class_id,
            User.role == role,
            order_by=User.full_name
        )

    def create_user(self, password, **fields):
        if self.get_user_by_username(fields["username"]):
            raise ConflictError(
                "Username already taken",
                fields=[{"field": "username", "message": "Username already taken"}]
            )

        user = User(**fields)
        user.set_password(password)

        with self.transaction():
            self.session.add(user)
            self.session.flush()

        logger.info("Created %s account %s", user.role, user.username)
        return user

    def update_user(self, id, /, **fields):
        fields.pop("password_hash", None)
        fields.pop("username", None)
        return self._update(User, id, **fields)

    def delete_user(self, id):
        self._delete(User, id)
        logger.info("Deleted user %s", id)

    # ---------------- CLASS LEVELS ---------------- #

    def get_class_level(self, id):
        return self._get(ClassLevel, id)

    def list_class_levels(self):
        return self._list(ClassLevel)

    def create_class_level(self, **fields):
        return self._create(ClassLevel, **fields)

    def update_class_level(self, id, /, **fields):
        return self._update(ClassLevel, id, **fields)

    # ---------------- STUDENT ACADEMICS ---------------- #

    def get_student_academics(self, id):
        return self._get(StudentAcademics, id)

    def list_student_academics(self, student_id):
        return self._list(
            StudentAcademics,
            StudentAcademics.student_id == student_id,
            order_by=StudentAcademics.academic_year
        )

    def get_current_academic_year(self, student_id):
        student = self.get_user(student_id)
        return student.academic_year if student else None

    def create_student_academics(self, **fields):
        return self._create(StudentAcademics, **fields)

    def update_student_academics(self, id, /, **fields):
        return self._update(StudentAcademics, id, **fields)

    # ---------------- SUBJECTS ---------------- #

    def get_subject(self, id):
        return self._get(Subject, id)

    def list_subjects(self):
        return self._list(Subject)

    def list_subjects_by_class(self, class_id):
        return self._list(Subject, Subject.class_level_id == class_id)

    def list_subjects_by_teacher(self, teacher_id):
        return self._list(Subject, Subject.teacher_id == teacher_id)

    def create_subject(self, **fields):
        return self._create(Subject, **fields)

    def update_subject(self, id, /, **fields):
        return self._update(Subject, id, **fields)

    def delete_subject(self, id):
        self._delete(Subject, id)

    # ---------------- ATTENDANCE ---------------- #

    def get_attendance(self, id):
        return self._get(Attendance, id)

    def find_attendance(self, user_id, subject_id, date):
        return (
            self.session.query(Attendance)
            .filter_by(user_id=user_id, subject_id=subject_id, date=date)
            .first()
        )

    def list_attendance_by_user(self, user_id):
        return self._list(
            Attendance,
            Attendance.user_id == user_id,
            order_by=Attendance.date
        )

    def list_attendance_by_class(self, class_id, date):
        return self._list(
            Attendance,
            Attendance.class_level_id == class_id,
            Attendance.date == date
        )

    def list_attendance_in_range(self, user_id, start, end, subject_id=None):
        criteria = [
            Attendance.user_id == user_id,
            Attendance.date >= start,
            Attendance.date <= end
        ]
        if subject_id is not None:
            criteria.append(Attendance.subject_id == subject_id)

        return self._list(Attendance, *criteria, order_by=Attendance.date)

    def count_attendance_by_month(self, user_id, year):
        """(month, status, count) rows for one user over a calendar year."""
        month = extract("month", Attendance.date)

        return (
            self.session.query(month, Attendance.status, func.count(Attendance.id))
            .filter(
                Attendance.user_id == user_id,
                extract("year", Attendance.date) == year
            )
            .group_by(month, Attendance.status)
            .order_by(month)
            .all()
        )

    def create_attendance(self, **fields):
        fields.pop("notification_sent", None)
        return self._create(Attendance, **fields)

    def update_attendance(self, id, /, **fields):
        return self._update(Attendance, id, **fields)

    # ---------------- ATTENDANCE STATS ---------------- #

    def get_attendance_stats(self, user_id, subject_id, month, year):
        return (
            self.session.query(AttendanceStats)
            .filter_by(user_id=user_id, subject_id=subject_id, month=month, year=year)
            .first()
        )

    def list_attendance_stats(self, user_id, year):
        return self._list(
            AttendanceStats,
            AttendanceStats.user_id == user_id,
            AttendanceStats.year == year,
            order_by=AttendanceStats.month
        )

    def upsert_attendance_stats(self, user_id, subject_id, month, year, **counts):
        stats = self.get_attendance_stats(user_id, subject_id, month, year)

        with self.transaction():
            if stats is None:
                stats = AttendanceStats(
                    user_id=user_id,
                    subject_id=subject_id,
                    month=month,
                    year=year
                )
                self.session.add(stats)

            for name, value in counts.items():
                setattr(stats, name, value)

            self.session.flush()

        return stats

    # ---------------- EXAM RESULTS ---------------- #

    def get_exam_result(self, id):
        return self._get(ExamResult, id)

    def list_exam_results(self, student_id):
        return self._list(
            ExamResult,
            ExamResult.student_id == student_id,
            order_by=ExamResult.exam_date
        )

    def create_exam_result(self, **fields):
        return self._create(ExamResult, **fields)

    def update_exam_result(self, id, /, **fields):
        return self._update(ExamResult, id, **fields)

    # ---------------- ANNOUNCEMENTS ---------------- #

    def get_announcement(self, id):
        return self._get(Announcement, id)

    def list_announcements(self):
        return self._list(Announcement, order_by=Announcement.created_at.desc())

    def create_announcement(self, **fields):
        fields.pop("created_at", None)
        return self._create(Announcement, **fields)

    def delete_announcement(self, id):
        self._delete(Announcement, id)

    # ---------------- MATERIALS ---------------- #

    def get_material(self, id):
        return self._get(Material, id)

    def list_materials(self):
        return self._list(Material, order_by=Material.created_at.desc())

    def list_materials_by_subject(self, subject_id):
        return self._list(
            Material,
            Material.subject_id == subject_id,
            order_by=Material.created_at.desc()
        )

    def create_material(self, **fields):
        fields.pop("created_at", None)
        return self._create(Material, **fields)

    def delete_material(self, id):
        self._delete(Material, id)
