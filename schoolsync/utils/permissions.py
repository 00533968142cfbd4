"""
Role-based rules for every API operation.

Each operation maps to a rule ``rule(actor, target) -> bool``. ``actor`` is an
authenticated ``User`` (or ``None`` for anonymous callers) and ``target`` is
whatever the operation acts on: a user id for self-service operations, or a
record carrying an owner field for author/uploader checks.
"""

ADMIN = "admin"
TEACHER = "teacher"
STUDENT = "student"

STAFF = (ADMIN, TEACHER)


def _role_in(*roles):

    def rule(actor, target):
        return actor.role in roles

    return rule


def _self_or(*roles):
    """Allowed for the listed roles, or for a user acting on their own id."""

    def rule(actor, target):
        return actor.role in roles or target == actor.id

    return rule


def _owner_or_admin(owner_field):

    def rule(actor, target):
        if actor.role == ADMIN:
            return True
        return target is not None and getattr(target, owner_field) == actor.id

    return rule


def _anyone(actor, target):
    return True


PUBLIC_OPERATIONS = {
    "class_levels.read",
    "subjects.read",
}


RULES = {
    # Users
    "users.list": _role_in(ADMIN),
    "users.create": _role_in(ADMIN),
    "users.list_by_class": _role_in(*STAFF),
    "users.update": _self_or(ADMIN),
    "users.change_role": _role_in(ADMIN),
    "users.delete": _role_in(ADMIN),

    # Class levels
    "class_levels.read": _anyone,
    "class_levels.manage": _role_in(ADMIN),

    # Subjects
    "subjects.read": _anyone,
    "subjects.manage": _role_in(ADMIN),

    # Attendance
    "attendance.read": _anyone,
    "attendance.read_class": _role_in(*STAFF),
    "attendance.record": _role_in(*STAFF),
    "attendance.update": _role_in(*STAFF),
    "attendance.stats": _self_or(*STAFF),

    # Academics
    "academics.read": _self_or(*STAFF),
    "academics.update": _role_in(ADMIN),
    "students.promote": _role_in(ADMIN),

    # Exam results
    "results.read": _self_or(*STAFF),
    "results.create": _role_in(*STAFF),
    "results.update": _role_in(*STAFF),

    # Announcements
    "announcements.read": _anyone,
    "announcements.create": _role_in(*STAFF),
    "announcements.delete": _owner_or_admin("author_id"),

    # Materials
    "materials.read": _anyone,
    "materials.create": _role_in(*STAFF),
    "materials.delete": _owner_or_admin("uploaded_by"),
}


class AccessPolicy:

    def __init__(self, rules=None, public=None):
        self.rules = RULES if rules is None else rules
        self.public = PUBLIC_OPERATIONS if public is None else public

    def is_public(self, operation):
        return operation in self.public

    def can_perform(self, operation, actor, target=None):
        if operation not in self.rules:
            raise KeyError(f"Unknown operation: {operation}")

        if actor is None or not getattr(actor, "is_authenticated", False):
            return self.is_public(operation)

        return bool(self.rules[operation](actor, target))


policy = AccessPolicy()
