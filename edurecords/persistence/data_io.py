"""
Saving and loading the registry to and from a pipe-delimited text file.

Format, one entity per line::

    STUDENT|id|name|email|courseCode|gradesCSV|attendancePercentage
    STAFF|id|name|email|role|department|tasksCSV
    COURSE|code|title|enrolledIdsCSV

Loading reads the whole file first and then processes it in two passes:
courses before students and staff, so a student line can reference a course
that appears later in the file.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.entities import Student, Staff, Course
from ..core.exceptions import EduRecordsError, RecordFormatError
from ..services.data_manager import DataManager
from .records import StudentRecord, StaffRecord, CourseRecord, parse_line

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


@dataclass
class PersistenceResult:
    """Outcome of a save or load."""
    success: bool
    message: str
    path: str
    students: int = 0
    staff: int = 0
    courses: int = 0
    skipped_lines: List[Tuple[int, str]] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)


class DataIO:
    """Codec between a ``DataManager`` and its text file.

    Neither ``save`` nor ``load`` raises: every failure is logged and returned
    as an unsuccessful ``PersistenceResult``.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self._encoding = encoding

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def encode(self, manager: DataManager) -> List[str]:
        """Render every student, then every staff member, then every course."""
        lines = []
        for student in manager.get_students():
            lines.append(self._encode_entity(StudentRecord.from_student, student, "student"))
        for staff in manager.get_staff_members():
            lines.append(self._encode_entity(StaffRecord.from_staff, staff, "staff member"))
        for course in manager.get_courses():
            lines.append(self._encode_entity(CourseRecord.from_course, course, "course"))
        return lines

    @staticmethod
    def _encode_entity(to_record, entity, label: str) -> str:
        try:
            return to_record(entity).to_line()
        except RecordFormatError as e:
            key = entity.code if isinstance(entity, Course) else entity.id
            raise RecordFormatError(f"Cannot save {label} {key}: {e.message}", error_code=e.error_code)

    def save(self, manager: DataManager, path: str) -> PersistenceResult:
        """Overwrite ``path`` with the full contents of ``manager``."""
        try:
            lines = self.encode(manager)
        except RecordFormatError as e:
            logger.error("Save to %s aborted: %s", path, e.message)
            return PersistenceResult(False, f"Error saving data: {e.message}", path)

        try:
            with open(path, "w", encoding=self._encoding, newline="\n") as f:
                for line in lines:
                    f.write(line + "\n")
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            return PersistenceResult(False, f"Error saving data: {e}", path)

        result = PersistenceResult(
            True,
            f"Data saved successfully to {path}",
            path,
            students=manager.student_count,
            staff=manager.staff_count,
            courses=manager.course_count,
        )
        logger.info("Saved %d students, %d staff, %d courses to %s",
                    result.students, result.staff, result.courses, path)
        return result

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, manager: DataManager, path: str, replace: bool = False) -> PersistenceResult:
        """Populate ``manager`` from ``path``.

        Records merge into what is already registered; an ID or course code
        that already exists is reported as a duplicate and left alone. With
        ``replace`` the registry is cleared once the file has been read.
        Malformed lines are skipped and listed in the result.
        """
        try:
            with open(path, "r", encoding=self._encoding) as f:
                raw_lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read %s: %s", path, e)
            return PersistenceResult(False, f"Error loading data: {e}", path)

        if replace:
            manager.clear()

        result = PersistenceResult(True, "", path)
        records = self._parse_lines(raw_lines, result)

        loaded_courses = self._load_courses(manager, records, result)
        self._load_people(manager, records, result)
        self._reconcile_enrollments(manager, loaded_courses)

        result.message = f"Data loaded successfully from {path}"
        if result.skipped_lines:
            result.message += f" ({len(result.skipped_lines)} line(s) skipped)"
        if result.duplicates:
            result.message += f" ({len(result.duplicates)} duplicate(s) ignored)"
        logger.info("Loaded %d students, %d staff, %d courses from %s",
                    result.students, result.staff, result.courses, path)
        return result

    @staticmethod
    def _skip(result: PersistenceResult, line_number: int, reason: str,
              error_code: Optional[str] = None) -> None:
        logger.warning("Skipping line %d [%s]: %s", line_number, error_code or "INVALID_ENTITY", reason)
        result.skipped_lines.append((line_number, reason))

    def _parse_lines(self, raw_lines: List[str], result: PersistenceResult) -> list:
        records = []
        for line_number, line in enumerate(raw_lines, 1):
            if not line.strip():
                continue
            try:
                records.append((line_number, parse_line(line, line_number)))
            except RecordFormatError as e:
                self._skip(result, line_number, e.message, e.error_code)
        return records

    def _load_courses(self, manager: DataManager, records: list,
                      result: PersistenceResult) -> List[Course]:
        """First pass: courses, with enrolled IDs taken straight from the line."""
        loaded = []
        for line_number, record in records:
            if not isinstance(record, CourseRecord):
                continue
            try:
                course = Course(record.code, record.title)
            except EduRecordsError as e:
                self._skip(result, line_number, e.message)
                continue
            if not manager.add_course(course):
                result.duplicates.append(f"COURSE {record.code}")
                continue
            for student_id in record.enrolled_ids:
                course.enrol_student(student_id)
            loaded.append(course)
            result.courses += 1
        return loaded

    def _load_people(self, manager: DataManager, records: list,
                     result: PersistenceResult) -> None:
        """Second pass: students (linked to the courses of pass one) and staff."""
        for line_number, record in records:
            if isinstance(record, StudentRecord):
                student = self._build_student(manager, record, line_number, result)
                if student is not None and manager.add_student(student):
                    result.students += 1
            elif isinstance(record, StaffRecord):
                staff = self._build_staff(manager, record, line_number, result)
                if staff is not None and manager.add_staff(staff):
                    result.staff += 1

    def _build_student(self, manager: DataManager, record: StudentRecord,
                       line_number: int, result: PersistenceResult) -> Optional[Student]:
        if manager.find_student_by_id(record.id) is not None:
            result.duplicates.append(f"STUDENT {record.id}")
            return None
        try:
            student = Student(record.id, record.name, record.email,
                              attendance_percentage=record.attendance_percentage)
        except EduRecordsError as e:
            self._skip(result, line_number, e.message)
            return None

        for grade in record.grades:
            if not student.add_grade(grade):
                logger.warning("Line %d: dropped out-of-range grade %d for student %d",
                               line_number, grade, record.id)

        if record.course_code:
            course = manager.find_course_by_code(record.course_code)
            if course is None:
                logger.warning("Line %d: student %d references unknown course %s",
                               line_number, record.id, record.course_code)
            else:
                student.set_course(course)
        return student

    def _build_staff(self, manager: DataManager, record: StaffRecord,
                     line_number: int, result: PersistenceResult) -> Optional[Staff]:
        if manager.find_staff_by_id(record.id) is not None:
            result.duplicates.append(f"STAFF {record.id}")
            return None
        try:
            staff = Staff(record.id, record.name, record.email, record.role, record.department)
        except EduRecordsError as e:
            self._skip(result, line_number, e.message)
            return None
        for task in record.tasks:
            staff.restore_task(task)
        return staff

    @staticmethod
    def _reconcile_enrollments(manager: DataManager, courses: List[Course]) -> None:
        """Drop IDs of students that exist but belong to another course (or none).

        IDs with no matching student stay enrolled.
        """
        for course in courses:
            for student_id in course.enrolled_ids:
                student = manager.find_student_by_id(student_id)
                if student is not None and student.course is not course:
                    logger.warning("Course %s listed student %d enrolled elsewhere; removed",
                                   course.code, student_id)
                    course.remove_student(student_id)
