"""
Core entities for the EduRecords system: people, students, staff and courses.
"""

import random
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from .enums import (
    PersonType, DATE_FORMAT, FIELD_SEPARATOR, VALUE_SEPARATOR,
    MIN_GRADE, MAX_GRADE, MIN_ATTENDANCE, MAX_ATTENDANCE, MAX_TASK_DAYS
)
from .enrollment import reassign_enrollment
from .exceptions import ValidationError


def generate_attendance(rng: Optional[random.Random] = None) -> float:
    """Draw a synthetic attendance percentage in [85, 100), biased toward 100."""
    draw = (rng or random).random()
    biased = 1 - (draw * draw)
    return MIN_ATTENDANCE + biased * (MAX_ATTENDANCE - MIN_ATTENDANCE)


def _require_text(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be a non-empty string")
    return value


class Person(ABC):
    """Abstract base class for students and staff: an id, a name and an email."""

    def __init__(self, person_id: int, name: str, email: str):
        if isinstance(person_id, bool) or not isinstance(person_id, int):
            raise ValidationError(f"ID must be an integer, got {person_id!r}")
        self._id = person_id
        self._name = _require_text(name, "Name")
        self._email = email or ""

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = _require_text(value, "Name")

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = value or ""

    @property
    @abstractmethod
    def person_type(self) -> PersonType:
        """Which kind of person this is."""

    def __str__(self) -> str:
        return f"{self._id}: {self._name} ({self._email})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, name={self._name!r})"


class Course:
    """Course identified by a code, with an ordered set of enrolled student IDs."""

    def __init__(self, code: str, title: str):
        self._code = _require_text(code, "Course code").strip()
        self._title = _require_text(title, "Course title")
        self._enrolled_ids: List[int] = []

    @property
    def code(self) -> str:
        return self._code

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = _require_text(value, "Course title")

    @property
    def enrolled_ids(self) -> List[int]:
        """Enrolled student IDs in enrollment order."""
        return self._enrolled_ids.copy()

    @property
    def enrolled_count(self) -> int:
        return len(self._enrolled_ids)

    def matches_code(self, code: Optional[str]) -> bool:
        """Case-insensitive comparison against another course code."""
        if code is None:
            return False
        return self._code.casefold() == code.strip().casefold()

    def is_enrolled(self, student_id: int) -> bool:
        return student_id in self._enrolled_ids

    def enrol_student(self, student_id: int) -> None:
        """Add a student ID unless it is already enrolled."""
        if student_id not in self._enrolled_ids:
            self._enrolled_ids.append(student_id)

    def remove_student(self, student_id: int) -> None:
        """Remove a student ID; unknown IDs are ignored."""
        if student_id in self._enrolled_ids:
            self._enrolled_ids.remove(student_id)

    def __str__(self) -> str:
        return f"{self._code}: {self._title} ({self.enrolled_count} enrolled)"

    def __repr__(self) -> str:
        return f"Course(code={self._code!r}, enrolled={self._enrolled_ids})"


class Student(Person):
    """Student with an optional course, a list of grades and an attendance figure."""

    person_type = PersonType.STUDENT

    def __init__(self, student_id: int, name: str, email: str,
                 course: Optional[Course] = None,
                 attendance_percentage: Optional[float] = None):
        super().__init__(student_id, name, email)
        # Roster is updated when the registry accepts the student
        self._course: Optional[Course] = course
        self._grades: List[int] = []
        if attendance_percentage is None:
            self._attendance_percentage = generate_attendance()
        else:
            self.attendance_percentage = attendance_percentage

    @property
    def course(self) -> Optional[Course]:
        return self._course

    @property
    def course_code(self) -> Optional[str]:
        """Code of the linked course, or None when unassigned."""
        return self._course.code if self._course is not None else None

    @property
    def grades(self) -> List[int]:
        return self._grades.copy()

    @property
    def attendance_percentage(self) -> float:
        return self._attendance_percentage

    @attendance_percentage.setter
    def attendance_percentage(self, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"Attendance must be a number, got {value!r}")
        if not 0.0 <= value <= MAX_ATTENDANCE:
            raise ValidationError("Attendance must be between 0 and 100")
        self._attendance_percentage = float(value)

    def set_course(self, course: Optional[Course]) -> None:
        """Move this student to ``course`` (or to no course), updating both sides."""
        reassign_enrollment(self, course)

    def add_grade(self, grade: int) -> bool:
        """Record a grade between 1 and 9. Returns False and stores nothing otherwise."""
        if isinstance(grade, bool) or not isinstance(grade, int):
            return False
        if MIN_GRADE <= grade <= MAX_GRADE:
            self._grades.append(grade)
            return True
        return False

    def calculate_average(self) -> float:
        """Mean of all grades, or 0.0 when no grades are recorded."""
        if not self._grades:
            return 0.0
        return sum(self._grades) / len(self._grades)

    def __str__(self) -> str:
        course_info = self._course.code if self._course is not None else "No course assigned"
        return (f"{super().__str__()} | Course: {course_info} | "
                f"Attendance: {self._attendance_percentage:.1f}%")


class Staff(Person):
    """Staff member with a role, a department and a list of dated tasks."""

    person_type = PersonType.STAFF

    def __init__(self, staff_id: int, name: str, email: str, role: str, department: str):
        super().__init__(staff_id, name, email)
        self._role = role
        self._department = department
        self._tasks: List[str] = []

    @property
    def role(self) -> str:
        return self._role

    @role.setter
    def role(self, value: str) -> None:
        self._role = value

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, value: str) -> None:
        self._department = value

    @property
    def tasks(self) -> List[str]:
        """Task entries as display strings, in assignment order."""
        return self._tasks.copy()

    @staticmethod
    def format_task(description: str, deadline: date) -> str:
        return f"{description} (Due: {deadline.strftime(DATE_FORMAT)})"

    def assign_task(self, description: str, deadline: date, today: Optional[date] = None) -> bool:
        """
        Append a task due within the next 90 days.

        The deadline must be strictly after ``today`` (defaults to the current
        date) and at most 90 days later. Descriptions containing the data
        file's separators and deadlines that are not dates are refused.
        Returns whether the task was added.
        """
        if not isinstance(description, str) or not description.strip():
            return False
        if any(sep in description for sep in (FIELD_SEPARATOR, VALUE_SEPARATOR, "\n", "\r")):
            return False
        if isinstance(deadline, datetime):
            deadline = deadline.date()
        if not isinstance(deadline, date):
            return False
        today = today or date.today()
        days_until = (deadline - today).days
        if days_until <= 0 or days_until > MAX_TASK_DAYS:
            return False
        self._tasks.append(self.format_task(description.strip(), deadline))
        return True

    def restore_task(self, entry: str) -> None:
        """Append an already formatted task entry without re-validating its deadline."""
        self._tasks.append(entry)

    def remove_task(self, entry: str) -> bool:
        """Remove the first task whose stored string equals ``entry``."""
        if entry in self._tasks:
            self._tasks.remove(entry)
            return True
        return False

    def __str__(self) -> str:
        tasks = "; ".join(self._tasks) if self._tasks else "None"
        return f"{super().__str__()} - {self._role} in {self._department} | Tasks: {tasks}"
