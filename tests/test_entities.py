"""Tests for the entity model: students, staff, courses and enrollment sync."""

from datetime import date, datetime, timedelta
from random import Random

import pytest

from edurecords.core import (
    Course, Person, PersonType, Staff, Student, ValidationError, generate_attendance,
)

TODAY = date(2026, 10, 19)


@pytest.fixture
def cs101() -> Course:
    return Course("CS101", "Computer Science")


@pytest.fixture
def math201() -> Course:
    return Course("MATH201", "Further Mathematics")


@pytest.fixture
def alice() -> Student:
    return Student(1, "Alice", "alice@example.com", attendance_percentage=95.0)


@pytest.fixture
def bob_staff() -> Staff:
    return Staff(101, "Bob", "bob@example.com", "Lecturer", "IT")


# ---------------------------------------------------------------------------
# Person
# ---------------------------------------------------------------------------

class TestPerson:
    def test_person_is_abstract(self):
        with pytest.raises(TypeError):
            Person(1, "Nobody", "nobody@example.com")

    def test_subclasses_report_their_kind(self, alice, bob_staff):
        assert alice.person_type is PersonType.STUDENT
        assert bob_staff.person_type is PersonType.STAFF

    def test_name_and_email_are_mutable(self, alice):
        alice.name = "Alice Smith"
        alice.email = "asmith@example.com"
        assert alice.name == "Alice Smith"
        assert alice.email == "asmith@example.com"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Student(2, "  ", "x@example.com")

    def test_non_integer_id_rejected(self):
        with pytest.raises(ValidationError):
            Student("7", "Eve", "eve@example.com")

    def test_str_includes_id_name_and_email(self, alice):
        assert str(alice).startswith("1: Alice (alice@example.com)")


# ---------------------------------------------------------------------------
# Student grades
# ---------------------------------------------------------------------------

class TestStudentGrades:
    @pytest.mark.parametrize("grade", [1, 5, 9])
    def test_valid_grade_accepted(self, alice, grade):
        assert alice.add_grade(grade) is True
        assert alice.grades == [grade]

    @pytest.mark.parametrize("grade", [0, 10, -3])
    def test_out_of_range_grade_rejected(self, alice, grade):
        assert alice.add_grade(grade) is False
        assert alice.grades == []

    def test_average_of_seven_and_nine_is_eight(self, alice):
        alice.add_grade(7)
        alice.add_grade(9)
        assert alice.calculate_average() == 8.0

    def test_average_without_grades_is_zero(self, alice):
        assert alice.calculate_average() == 0.0

    def test_average_is_not_rounded(self, alice):
        for grade in (7, 8, 8):
            alice.add_grade(grade)
        assert alice.calculate_average() == pytest.approx(23 / 3)

    def test_grades_property_is_a_copy(self, alice):
        alice.add_grade(4)
        alice.grades.append(9)
        assert alice.grades == [4]


# ---------------------------------------------------------------------------
# Student attendance
# ---------------------------------------------------------------------------

class TestAttendance:
    def test_generated_attendance_in_range(self):
        for _ in range(200):
            student = Student(1, "Sam", "sam@example.com")
            assert 85.0 <= student.attendance_percentage <= 100.0

    def test_generator_biased_toward_upper_bound(self):
        rng = Random(42)
        values = [generate_attendance(rng) for _ in range(2000)]
        assert sum(values) / len(values) > 92.5

    def test_explicit_attendance_kept(self, alice):
        assert alice.attendance_percentage == 95.0

    def test_attendance_outside_percentage_rejected(self, alice):
        with pytest.raises(ValidationError):
            alice.attendance_percentage = 120.0


# ---------------------------------------------------------------------------
# Enrollment
# ---------------------------------------------------------------------------

class TestEnrollment:
    def test_set_course_updates_both_sides(self, alice, cs101):
        alice.set_course(cs101)
        assert alice.course is cs101
        assert cs101.enrolled_ids == [1]

    def test_reassign_moves_id_between_courses(self, alice, cs101, math201):
        alice.set_course(cs101)
        alice.set_course(math201)
        assert cs101.enrolled_ids == []
        assert math201.enrolled_ids == [1]
        assert alice.course_code == "MATH201"

    def test_set_course_none_clears_enrollment(self, alice, cs101):
        alice.set_course(cs101)
        alice.set_course(None)
        assert alice.course is None
        assert alice.course_code is None
        assert not cs101.is_enrolled(1)

    def test_same_course_twice_does_not_duplicate(self, alice, cs101):
        alice.set_course(cs101)
        alice.set_course(cs101)
        assert cs101.enrolled_ids == [1]

    def test_constructor_course_leaves_roster_alone(self, cs101):
        student = Student(5, "Eve", "eve@example.com", cs101)
        assert student.course is cs101
        assert cs101.enrolled_ids == []


# ---------------------------------------------------------------------------
# Course
# ---------------------------------------------------------------------------

class TestCourse:
    def test_enrol_is_idempotent_and_ordered(self, cs101):
        for student_id in (3, 1, 3, 2):
            cs101.enrol_student(student_id)
        assert cs101.enrolled_ids == [3, 1, 2]

    def test_remove_unknown_id_is_noop(self, cs101):
        cs101.enrol_student(1)
        cs101.remove_student(99)
        assert cs101.enrolled_ids == [1]

    def test_matches_code_ignores_case(self, cs101):
        assert cs101.matches_code("cs101")
        assert not cs101.matches_code("CS102")
        assert not cs101.matches_code(None)

    def test_str_shows_enrolled_count(self, cs101):
        cs101.enrol_student(1)
        assert str(cs101) == "CS101: Computer Science (1 enrolled)"
        assert cs101.enrolled_count == 1


# ---------------------------------------------------------------------------
# Staff tasks
# ---------------------------------------------------------------------------

class TestStaffTasks:
    def test_task_within_window_added(self, bob_staff):
        deadline = TODAY + timedelta(days=7)
        assert bob_staff.assign_task("Prepare lesson plan", deadline, today=TODAY) is True
        assert bob_staff.tasks == [f"Prepare lesson plan (Due: {deadline:%d/%m/%Y})"]

    def test_past_deadline_rejected(self, bob_staff):
        assert bob_staff.assign_task("Review syllabus", TODAY - timedelta(days=1), today=TODAY) is False
        assert bob_staff.tasks == []

    def test_deadline_today_rejected(self, bob_staff):
        assert bob_staff.assign_task("Review syllabus", TODAY, today=TODAY) is False

    def test_deadline_at_ninety_days_accepted(self, bob_staff):
        assert bob_staff.assign_task("Plan term", TODAY + timedelta(days=90), today=TODAY) is True

    def test_deadline_beyond_ninety_days_rejected(self, bob_staff):
        assert bob_staff.assign_task("Plan next term", TODAY + timedelta(days=120), today=TODAY) is False
        assert "None" in str(bob_staff)

    @pytest.mark.parametrize("description", ["Mark, then file", "a|b", "   "])
    def test_descriptions_that_break_the_file_format_rejected(self, bob_staff, description):
        assert bob_staff.assign_task(description, TODAY + timedelta(days=3), today=TODAY) is False

    @pytest.mark.parametrize("deadline", [None, "26/10/2026", 7])
    def test_deadline_that_is_not_a_date_rejected(self, bob_staff, deadline):
        assert bob_staff.assign_task("Mark coursework", deadline, today=TODAY) is False
        assert bob_staff.tasks == []

    def test_datetime_deadline_uses_its_date(self, bob_staff):
        deadline = datetime(2026, 10, 26, 17, 30)
        assert bob_staff.assign_task("Mark coursework", deadline, today=TODAY) is True
        assert bob_staff.tasks == ["Mark coursework (Due: 26/10/2026)"]

    def test_default_today_is_current_date(self, bob_staff):
        assert bob_staff.assign_task("Mark coursework", date.today() + timedelta(days=14)) is True

    def test_remove_existing_task(self, bob_staff):
        bob_staff.assign_task("Prepare lesson plan", TODAY + timedelta(days=7), today=TODAY)
        entry = bob_staff.tasks[0]
        assert bob_staff.remove_task(entry) is True
        assert bob_staff.tasks == []

    def test_remove_missing_task(self, bob_staff):
        assert bob_staff.remove_task("Non-existent task") is False

    def test_remove_only_first_match(self, bob_staff):
        bob_staff.restore_task("Duplicate")
        bob_staff.restore_task("Duplicate")
        bob_staff.remove_task("Duplicate")
        assert bob_staff.tasks == ["Duplicate"]

    def test_role_and_department_update(self, bob_staff):
        bob_staff.role = "Senior Lecturer"
        bob_staff.department = "Computer Science"
        assert bob_staff.role == "Senior Lecturer"
        assert bob_staff.department == "Computer Science"
