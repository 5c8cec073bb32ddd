"""
Read-only reports over the registry.
"""

from typing import List

from ..core.interfaces import Reportable
from .data_manager import DataManager


NO_STUDENTS_MESSAGE = "No students found."


class GradesReport(Reportable):
    """Average grade of every student, with its course."""

    def __init__(self, manager: DataManager):
        self._manager = manager

    def generate_report(self) -> str:
        lines = ["", "--- Grades Report ---"]
        students = self._manager.get_students()
        if not students:
            lines.append(NO_STUDENTS_MESSAGE)
        for student in students:
            average = student.calculate_average()
            course_info = student.course_code or "No course"
            # 0.0 means no grades; a real average is never below 1
            average_text = "N/A" if average == 0 else f"{average:.2f}"
            lines.append(
                f"{student.name} (ID: {student.id}) - Course: {course_info} "
                f"| Average Grade: {average_text}"
            )
        return "\n".join(lines) + "\n"


class AttendanceReport(Reportable):
    """Per-student attendance, per-course averages and the overall average."""

    def __init__(self, manager: DataManager):
        self._manager = manager

    def generate_report(self) -> str:
        lines = ["", "--- Attendance Report ---"]
        students = self._manager.get_students()
        if not students:
            lines.append(NO_STUDENTS_MESSAGE)
            return "\n".join(lines) + "\n"

        for student in students:
            lines.append(
                f"{student.name} (ID: {student.id}) - Attendance: "
                f"{student.attendance_percentage:.1f}%"
            )

        course_lines = self._course_average_lines()
        if course_lines:
            lines.append("")
            lines.append("--- Course Averages ---")
            lines.extend(course_lines)

        overall = sum(s.attendance_percentage for s in students) / len(students)
        lines.append("")
        lines.append(f"Overall Average Attendance: {overall:.1f}%")
        return "\n".join(lines) + "\n"

    def _course_average_lines(self) -> List[str]:
        lines = []
        for course in self._manager.get_courses():
            enrolled = self._manager.get_enrolled_students(course.code)
            if not enrolled:
                continue
            average = sum(s.attendance_percentage for s in enrolled) / len(enrolled)
            lines.append(f"Course {course.code} Average Attendance: {average:.1f}%")
        return lines


class ReportManager:
    """Facade that builds the available reports for a registry."""

    def __init__(self, manager: DataManager):
        self._manager = manager

    def build_grades_report(self) -> str:
        return GradesReport(self._manager).generate_report()

    def build_attendance_report(self) -> str:
        return AttendanceReport(self._manager).generate_report()
