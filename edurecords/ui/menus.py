"""
Console menus.

Each menu prints its options, reads a choice through the shared
``InputReader`` and runs one action. Typing the escape word at any prompt
abandons the current action and returns to the main menu.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..core.entities import Student, Staff, Course
from ..persistence.data_io import DataIO
from ..services.data_manager import DataManager
from ..services.report_manager import ReportManager
from .inputs import InputReader


@dataclass
class MenuContext:
    """Everything the menus share."""
    manager: DataManager
    reader: InputReader
    data_io: DataIO
    data_file: str


class Menu(ABC):
    """Base class: a titled list of options mapped to actions."""

    title = ""

    def __init__(self, context: MenuContext):
        self._context = context
        self._manager = context.manager
        self._reader = context.reader

    @abstractmethod
    def _options(self) -> Dict[int, Tuple[str, Callable[[], None]]]:
        """Numbered options, each a label and the action it runs."""

    def _say(self, text: str = "") -> None:
        self._reader.write(text)

    def _return_to_main(self) -> None:
        self._say("\nReturning to Main Menu...")

    def show(self) -> None:
        options = self._options()
        back = len(options) + 1
        self._say(f"\n----- {self.title} -----")
        for number, (label, _) in options.items():
            self._say(f"{number}. {label}")
        self._say(f"{back}. Back")

        choice = self._reader.read_int(f"Choose an option (1-{back}):")
        if choice.cancelled or choice.value == back:
            self._return_to_main()
            return
        if choice.value not in options:
            self._say("\nInvalid option.")
            return
        options[choice.value][1]()

    def _find_student(self, prompt: str = "Enter Student ID:") -> Optional[Student]:
        student_id = self._reader.read_int(prompt)
        if student_id.cancelled:
            self._return_to_main()
            return None
        student = self._manager.find_student_by_id(student_id.value)
        if student is None:
            self._say("\nStudent not found.")
        return student

    def _find_staff(self, prompt: str = "Enter Staff ID:") -> Optional[Staff]:
        staff_id = self._reader.read_int(prompt)
        if staff_id.cancelled:
            self._return_to_main()
            return None
        staff = self._manager.find_staff_by_id(staff_id.value)
        if staff is None:
            self._say("\nStaff member not found.")
        return staff

    def _find_course(self, prompt: str = "Enter the Course Code:") -> Optional[Course]:
        code = self._reader.read_string(prompt)
        if code.cancelled:
            self._return_to_main()
            return None
        course = self._manager.find_course_by_code(code.value)
        if course is None:
            self._say("\nCourse not found.")
        return course


class StudentMenu(Menu):
    title = "Student Menu"

    def _options(self):
        return {
            1: ("Add Student", self._add_student),
            2: ("List Students", self._list_students),
            3: ("Remove Student", self._remove_student),
            4: ("Add Grade to Student", self._add_grade),
            5: ("Change Student Course", self._change_course),
        }

    def _add_student(self) -> None:
        reader = self._reader
        student_id = reader.read_int("Enter Student ID:")
        if student_id.cancelled:
            return self._return_to_main()
        if self._manager.find_student_by_id(student_id.value) is not None:
            self._say("\nStudent ID already exists. Student not added.")
            return
        name = reader.read_string("Enter Student Name:")
        if name.cancelled:
            return self._return_to_main()
        email = reader.read_string("Enter Student Email:")
        if email.cancelled:
            return self._return_to_main()
        enrol_now = reader.confirm("\nDo you want to enrol the student onto a course now?")
        if enrol_now.cancelled:
            return self._return_to_main()

        course = None
        if enrol_now.value:
            code = reader.read_string("Enter Course Code:")
            if code.cancelled:
                return self._return_to_main()
            course = self._manager.find_course_by_code(code.value)
            if course is not None:
                self._say(f"\nCourse code already exists. Enrolling onto: {course.title}")
            else:
                title = reader.read_string("Enter Course Title:")
                if title.cancelled:
                    return self._return_to_main()
                course = Course(code.value, title.value)
                self._manager.add_course(course)
                self._say("\nNew course created.")

        student = Student(student_id.value, name.value, email.value, course=course)
        if self._manager.add_student(student):
            self._say("\nStudent added successfully.")
        else:
            self._say("\nStudent ID already exists. Student not added.")

    def _list_students(self) -> None:
        students = self._manager.get_students()
        if not students:
            self._say("\nNo students found.")
            return
        for student in students:
            self._say(f"\n{student}")

    def _remove_student(self) -> None:
        student_id = self._reader.read_int("Enter Student ID to remove:")
        if student_id.cancelled:
            return self._return_to_main()
        if self._manager.remove_student_by_id(student_id.value):
            self._say("\nStudent removed successfully.")
        else:
            self._say("\nStudent not found.")

    def _add_grade(self) -> None:
        student = self._find_student()
        if student is None:
            return
        grade = self._reader.read_int("Enter grade (1-9):")
        if grade.cancelled:
            return self._return_to_main()
        if student.add_grade(grade.value):
            self._say("\nGrade added successfully.")
        else:
            self._say(f"\nInvalid grade \"{grade.value}\". Grade must be between 1 and 9.")

    def _change_course(self) -> None:
        student = self._find_student()
        if student is None:
            return
        code = self._reader.read_string("Enter new Course Code (or 'none' to unenrol):")
        if code.cancelled:
            return self._return_to_main()
        if code.value.lower() == "none":
            student.set_course(None)
            self._say("\nStudent unenrolled.")
            return
        if self._manager.enrol_student(student.id, code.value):
            self._say("\nStudent enrolled successfully.")
        else:
            self._say("\nCourse not found.")


class StaffMenu(Menu):
    title = "Staff Menu"

    def _options(self):
        return {
            1: ("Add Staff", self._add_staff),
            2: ("List Staff", self._list_staff),
            3: ("Assign Task", self._assign_task),
            4: ("Remove Task", self._remove_task),
            5: ("Remove Staff", self._remove_staff),
        }

    def _add_staff(self) -> None:
        reader = self._reader
        answers = []
        for prompt in ("Enter Staff ID:", "Enter Staff Name:", "Enter Staff Email:",
                       "Enter Staff Role:", "Enter Staff Department:"):
            read = reader.read_int if not answers else reader.read_string
            answer = read(prompt)
            if answer.cancelled:
                return self._return_to_main()
            answers.append(answer.value)

        if self._manager.add_staff(Staff(*answers)):
            self._say("\nStaff added successfully.")
        else:
            self._say("\nStaff ID already exists. Staff not added.")

    def _list_staff(self) -> None:
        staff_members = self._manager.get_staff_members()
        if not staff_members:
            self._say("\nNo staff members found.")
            return
        for staff in staff_members:
            self._say(f"\n{staff}")

    def _assign_task(self) -> None:
        staff = self._find_staff()
        if staff is None:
            return
        description = self._reader.read_string("Enter task description:")
        if description.cancelled:
            return self._return_to_main()
        deadline = self._reader.read_valid_date("Enter task deadline")
        if deadline.cancelled:
            return self._return_to_main()
        if staff.assign_task(description.value, deadline.value):
            self._say("\nTask assigned.")
        else:
            self._say("\nTask not assigned. The description must not contain ',' or '|' "
                      "and the deadline must fall within the next 90 days.")

    def _remove_task(self) -> None:
        staff = self._find_staff()
        if staff is None:
            return
        tasks = staff.tasks
        if not tasks:
            self._say("\nThis staff member has no tasks.")
            return
        for number, task in enumerate(tasks, 1):
            self._say(f"{number}. {task}")
        choice = self._reader.read_int(f"Choose a task to remove (1-{len(tasks)}):")
        if choice.cancelled:
            return self._return_to_main()
        if not 1 <= choice.value <= len(tasks):
            self._say("\nInvalid option.")
            return
        staff.remove_task(tasks[choice.value - 1])
        self._say("\nTask removed.")

    def _remove_staff(self) -> None:
        staff_id = self._reader.read_int("Enter Staff ID to remove:")
        if staff_id.cancelled:
            return self._return_to_main()
        if self._manager.remove_staff_by_id(staff_id.value):
            self._say("\nStaff removed successfully.")
        else:
            self._say("\nStaff not found.")


class CourseMenu(Menu):
    title = "Course Menu"

    def _options(self):
        return {
            1: ("List Courses", self._list_courses),
            2: ("Add New Course", self._add_course),
            3: ("Enrol Student Onto Course", self._enrol_student),
            4: ("List Students In A Course", self._list_students_in_course),
            5: ("Search Course By Code", self._search_course),
            6: ("Remove Course", self._remove_course),
        }

    def _list_courses(self) -> None:
        courses = self._manager.get_courses()
        if not courses:
            self._say("\nNo courses found.")
            return
        for course in courses:
            self._say(f"\n{course}")

    def _add_course(self) -> None:
        code = self._reader.read_string("Enter the new Course Code:")
        if code.cancelled:
            return self._return_to_main()
        title = self._reader.read_string("Enter the new Course Title:")
        if title.cancelled:
            return self._return_to_main()
        if self._manager.add_course(Course(code.value, title.value)):
            self._say("\nCourse added successfully.")
        else:
            self._say("\nCourse Code already exists. Course not added.")

    def _enrol_student(self) -> None:
        course = self._find_course()
        if course is None:
            return
        student = self._find_student("Enter Student ID to enrol:")
        if student is None:
            return
        if course.is_enrolled(student.id):
            self._say("\nStudent is already enrolled on this course.")
            return
        student.set_course(course)
        self._say("\nStudent enrolled successfully.")

    def _list_students_in_course(self) -> None:
        course = self._find_course()
        if course is None:
            return
        self._say(f"Students enrolled in {course.title}:")
        students = self._manager.get_enrolled_students(course.code)
        if not students:
            self._say("(none)")
        for student in students:
            self._say(str(student))

    def _search_course(self) -> None:
        course = self._find_course()
        if course is not None:
            self._say(str(course))

    def _remove_course(self) -> None:
        code = self._reader.read_string("Enter Course Code to remove:")
        if code.cancelled:
            return self._return_to_main()
        if self._manager.remove_course_by_code(code.value):
            self._say("\nCourse removed successfully.")
        else:
            self._say("\nCourse not found.")


class ReportsMenu(Menu):
    title = "Reports Menu"

    def _options(self):
        reports = ReportManager(self._manager)
        return {
            1: ("Grades Report", lambda: self._say(reports.build_grades_report())),
            2: ("Attendance Report", lambda: self._say(reports.build_attendance_report())),
        }


class SaveLoadMenu(Menu):
    title = "Save/Load Menu"

    def _options(self):
        return {
            1: ("Save Data", self._save),
            2: ("Load Data", self._load),
        }

    def _save(self) -> None:
        result = self._context.data_io.save(self._manager, self._context.data_file)
        self._say(f"\n{result.message}")

    def _load(self) -> None:
        replace = False
        if not self._manager.is_empty():
            answer = self._reader.confirm("\nReplace the records currently in memory?")
            if answer.cancelled:
                return self._return_to_main()
            replace = answer.value
        result = self._context.data_io.load(self._manager, self._context.data_file, replace=replace)
        self._say(f"\n{result.message}")
        for line_number, reason in result.skipped_lines:
            self._say(f"  line {line_number}: {reason}")


class MainMenu(Menu):
    title = "Main Menu"

    def _options(self):
        return {
            1: ("Students", StudentMenu(self._context).show),
            2: ("Staff", StaffMenu(self._context).show),
            3: ("Courses", CourseMenu(self._context).show),
            4: ("Reports", ReportsMenu(self._context).show),
            5: ("Save/Load", SaveLoadMenu(self._context).show),
        }

    def show(self) -> bool:
        """Run one round of the main menu. Returns False once exit is confirmed."""
        options = self._options()
        exit_choice = len(options) + 1
        self._say(f"\n~~~~~ {self.title} ~~~~~\n")
        for number, (label, _) in options.items():
            self._say(f"{number}. {label}")
        self._say(f"{exit_choice}. Exit")

        choice = self._reader.read_int(f"\nChoose an option (1-{exit_choice}):")
        if choice.cancelled:
            # Escape word keeps the loop going; end of input stops it
            return not self._reader.at_end
        if choice.value == exit_choice:
            confirm = self._reader.confirm("\nAre you sure you want to exit?")
            if confirm.cancelled:
                return not self._reader.at_end
            return not confirm.value
        if choice.value not in options:
            self._say("\nInvalid option. Please try again.")
            return True
        options[choice.value][1]()
        return True
