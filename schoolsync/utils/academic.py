import calendar
from datetime import date, datetime


def get_current_term():
    month = datetime.now().month

    if month <= 4:
        return 2
    elif month <= 8:
        return 3
    return 1


def get_current_academic_year():
    """The school year is named after the calendar year it starts in (September)."""
    now = datetime.now()

    if get_current_term() == 1:
        return now.year
    return now.year - 1


def month_bounds(year, month):
    """First and last calendar day of a month."""
    last_day = calendar.monthrange(year, month)[1]

    return date(year, month, 1), date(year, month, last_day)


def grade_from_marks(marks):
    if marks >= 75:
        return "A"
    elif marks >= 65:
        return "B"
    elif marks >= 50:
        return "C"
    elif marks >= 40:
        return "D"
    return "F"


def attendance_percentage(present_days, absent_days, late_days):
    total_days = present_days + absent_days + late_days

    if total_days == 0:
        return 0

    return present_days / total_days * 100
