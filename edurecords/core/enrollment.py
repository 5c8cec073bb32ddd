"""
Enrollment bookkeeping between students and courses.

A student's link to its course and the course's list of enrolled IDs are two
separate structures. Every change of enrollment goes through
``reassign_enrollment`` so that both sides always move together.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .entities import Course, Student


def reassign_enrollment(student: "Student", new_course: Optional["Course"]) -> None:
    """Move ``student`` from its current course (if any) to ``new_course``.

    Passing ``None`` leaves the student without a course. Re-assigning the
    same course is a no-op apart from making sure the ID is enrolled.
    """
    old_course = student._course
    if old_course is not None and old_course is not new_course:
        old_course.remove_student(student.id)
    if new_course is not None:
        new_course.enrol_student(student.id)
    student._course = new_course
