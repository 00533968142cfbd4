from schoolsync.models.user import User, ROLES
from schoolsync.models.academic import (
    ClassLevel,
    StudentAcademics,
    Subject,
    PROMOTION_STATUSES
)
from schoolsync.models.assessment import (
    Attendance,
    ExamResult,
    ATTENDANCE_STATUSES
)
from schoolsync.models.analytics import AttendanceStats
from schoolsync.models.communication import Announcement, Material
