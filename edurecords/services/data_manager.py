"""
In-memory registry of students, staff and courses.
"""

import logging
from typing import List, Optional

from ..core.entities import Student, Staff, Course
from ..core.enrollment import reassign_enrollment
from ..utils.logger import mask_email

logger = logging.getLogger(__name__)


class DataManager:
    """Owns every student, staff member and course and keeps enrollments consistent.

    Student and staff IDs are unique within their own collection; course codes
    are unique ignoring case. Mutations that fail validation return False and
    leave the registry untouched. Not thread-safe.
    """

    def __init__(self):
        self._students: List[Student] = []
        self._staff_members: List[Staff] = []
        self._courses: List[Course] = []

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    def add_student(self, student: Optional[Student]) -> bool:
        """Add a student; enrolls it in its course and registers that course if new."""
        if student is None or self.find_student_by_id(student.id) is not None:
            logger.debug("Rejected student %r: missing or duplicate ID", student)
            return False

        course = student.course
        if course is not None:
            tracked = self.find_course_by_code(course.code)
            if tracked is None:
                self._courses.append(course)
                logger.info("Registered course %s while adding student %d", course.code, student.id)
            elif tracked is not course:
                # Same code, different object: the registered course wins
                course = tracked
            reassign_enrollment(student, course)

        self._students.append(student)
        logger.info("Added student %d <%s>", student.id, mask_email(student.email))
        return True

    def remove_student_by_id(self, student_id: int) -> bool:
        """Remove a student after withdrawing it from its course."""
        student = self.find_student_by_id(student_id)
        if student is None:
            return False
        reassign_enrollment(student, None)
        self._students.remove(student)
        logger.info("Removed student %d", student_id)
        return True

    def find_student_by_id(self, student_id: int) -> Optional[Student]:
        for student in self._students:
            if student.id == student_id:
                return student
        return None

    def get_students(self) -> List[Student]:
        """All students in insertion order."""
        return self._students.copy()

    @property
    def student_count(self) -> int:
        return len(self._students)

    def enrol_student(self, student_id: int, code: str) -> bool:
        """Move a registered student into a registered course."""
        student = self.find_student_by_id(student_id)
        course = self.find_course_by_code(code)
        if student is None or course is None:
            return False
        student.set_course(course)
        return True

    # ------------------------------------------------------------------
    # Staff
    # ------------------------------------------------------------------

    def add_staff(self, staff: Optional[Staff]) -> bool:
        if staff is None or self.find_staff_by_id(staff.id) is not None:
            logger.debug("Rejected staff %r: missing or duplicate ID", staff)
            return False
        self._staff_members.append(staff)
        logger.info("Added staff %d <%s>", staff.id, mask_email(staff.email))
        return True

    def remove_staff_by_id(self, staff_id: int) -> bool:
        staff = self.find_staff_by_id(staff_id)
        if staff is None:
            return False
        self._staff_members.remove(staff)
        logger.info("Removed staff %d", staff_id)
        return True

    def find_staff_by_id(self, staff_id: int) -> Optional[Staff]:
        for staff in self._staff_members:
            if staff.id == staff_id:
                return staff
        return None

    def get_staff_members(self) -> List[Staff]:
        return self._staff_members.copy()

    @property
    def staff_count(self) -> int:
        return len(self._staff_members)

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------

    def add_course(self, course: Optional[Course]) -> bool:
        if course is None:
            return False
        existing = self.find_course_by_code(course.code)
        if existing is not None:
            logger.debug("Course %s already exists as %r", course.code, existing.title)
            return False
        self._courses.append(course)
        logger.info("Added course %s", course.code)
        return True

    def remove_course_by_code(self, code: str) -> bool:
        """Remove a course, first unlinking every student that points at it."""
        course = self.find_course_by_code(code)
        if course is None:
            return False
        for student in self._students:
            if student.course is not None and student.course.matches_code(course.code):
                reassign_enrollment(student, None)
        self._courses.remove(course)
        logger.info("Removed course %s", course.code)
        return True

    def find_course_by_code(self, code: Optional[str]) -> Optional[Course]:
        for course in self._courses:
            if course.matches_code(code):
                return course
        return None

    def get_courses(self) -> List[Course]:
        return self._courses.copy()

    @property
    def course_count(self) -> int:
        return len(self._courses)

    def get_enrolled_students(self, code: str) -> List[Student]:
        """Students enrolled in a course, in enrollment order.

        IDs that no longer match a registered student are skipped.
        """
        course = self.find_course_by_code(code)
        if course is None:
            return []
        students = []
        for student_id in course.enrolled_ids:
            student = self.find_student_by_id(student_id)
            if student is not None:
                students.append(student)
        return students

    # ------------------------------------------------------------------
    # Whole registry
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not (self._students or self._staff_members or self._courses)

    def clear(self) -> None:
        """Drop every entity."""
        self._students.clear()
        self._staff_members.clear()
        self._courses.clear()

    def get_statistics(self) -> dict:
        return {
            "students": len(self._students),
            "staff": len(self._staff_members),
            "courses": len(self._courses),
        }
