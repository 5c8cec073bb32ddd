"""Tests for saving and loading the data file."""

import logging
from datetime import date, timedelta

import pytest

from edurecords.core import Course, Staff, Student
from edurecords.persistence import DataIO
from edurecords.services import DataManager


@pytest.fixture
def data_io() -> DataIO:
    return DataIO()


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "records.txt")


@pytest.fixture
def populated() -> DataManager:
    manager = DataManager()
    cs101 = Course("CS101", "Computer Science")
    manager.add_course(cs101)

    alice = Student(1, "Alice", "alice@example.com", cs101, attendance_percentage=95.0)
    alice.add_grade(7)
    alice.add_grade(9)
    manager.add_student(alice)
    manager.add_student(Student(2, "Bob", "bob@example.com", attendance_percentage=87.5))

    staff = Staff(101, "Carol", "carol@example.com", "Lecturer", "IT")
    staff.assign_task("Prepare lesson plan", date.today() + timedelta(days=7))
    manager.add_staff(staff)
    return manager


def write_lines(path, *lines):
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


def read_lines(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------

class TestSave:
    def test_save_reports_success(self, data_io, populated, data_file):
        result = data_io.save(populated, data_file)
        assert result.success is True
        assert result.message == f"Data saved successfully to {data_file}"
        assert (result.students, result.staff, result.courses) == (2, 1, 1)

    def test_lines_ordered_students_staff_courses(self, data_io, populated, data_file):
        data_io.save(populated, data_file)
        tags = [line.split("|", 1)[0] for line in read_lines(data_file)]
        assert tags == ["STUDENT", "STUDENT", "STAFF", "COURSE"]

    def test_saved_content(self, data_io, populated, data_file):
        data_io.save(populated, data_file)
        lines = read_lines(data_file)
        assert lines[0] == "STUDENT|1|Alice|alice@example.com|CS101|7,9|95.0"
        assert lines[1] == "STUDENT|2|Bob|bob@example.com|||87.5"
        assert lines[3] == "COURSE|CS101|Computer Science|1"

    def test_empty_registry_writes_empty_file(self, data_io, data_file):
        assert data_io.save(DataManager(), data_file).success is True
        assert read_lines(data_file) == []

    def test_reserved_character_aborts_without_touching_file(self, data_io, populated, data_file):
        write_lines(data_file, "COURSE|OLD|Old data|")
        populated.add_student(Student(3, "Pipe|Name", "p@example.com", attendance_percentage=90.0))

        result = data_io.save(populated, data_file)

        assert result.success is False
        assert result.message.startswith("Error saving data:")
        assert read_lines(data_file) == ["COURSE|OLD|Old data|"]

    def test_unwritable_path(self, data_io, populated, tmp_path):
        result = data_io.save(populated, str(tmp_path / "missing" / "records.txt"))
        assert result.success is False
        assert result.message.startswith("Error saving data:")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestRoundTrip:
    def test_course_link_survives(self, data_io, data_file):
        manager = DataManager()
        manager.add_course(Course("CS101", "Computer Science"))
        manager.add_student(Student(1, "Alice", "alice@example.com",
                                    manager.find_course_by_code("CS101"),
                                    attendance_percentage=95.0))
        data_io.save(manager, data_file)

        loaded = DataManager()
        result = data_io.load(loaded, data_file)

        assert result.success is True
        student = loaded.find_student_by_id(1)
        assert student.course.code == "CS101"
        assert 1 in loaded.find_course_by_code("CS101").enrolled_ids
        assert student.course is loaded.find_course_by_code("CS101")

    def test_every_field_restored(self, data_io, populated, data_file):
        data_io.save(populated, data_file)
        loaded = DataManager()
        data_io.load(loaded, data_file)

        alice = loaded.find_student_by_id(1)
        assert alice.name == "Alice"
        assert alice.email == "alice@example.com"
        assert alice.grades == [7, 9]
        assert alice.calculate_average() == 8.0
        assert alice.attendance_percentage == 95.0
        assert loaded.find_student_by_id(2).course is None

        staff = loaded.find_staff_by_id(101)
        assert staff.role == "Lecturer"
        assert staff.department == "IT"
        assert staff.tasks == populated.find_staff_by_id(101).tasks

    def test_counts_match(self, data_io, populated, data_file):
        data_io.save(populated, data_file)
        loaded = DataManager()
        result = data_io.load(loaded, data_file)
        assert loaded.get_statistics() == populated.get_statistics()
        assert (result.students, result.staff, result.courses) == (2, 1, 1)

    def test_second_save_is_identical(self, data_io, populated, data_file, tmp_path):
        data_io.save(populated, data_file)
        loaded = DataManager()
        data_io.load(loaded, data_file)
        second = str(tmp_path / "second.txt")
        data_io.save(loaded, second)
        assert read_lines(second) == read_lines(data_file)


class TestLoad:
    def test_course_after_student_still_links(self, data_io, data_file):
        write_lines(
            data_file,
            "STUDENT|1|Alice|alice@example.com|cs101|8|90.0",
            "COURSE|CS101|Computer Science|1",
        )
        manager = DataManager()
        data_io.load(manager, data_file)
        assert manager.find_student_by_id(1).course is manager.find_course_by_code("CS101")
        assert manager.find_course_by_code("CS101").enrolled_ids == [1]

    def test_student_missing_from_roster_gets_enrolled(self, data_io, data_file):
        write_lines(
            data_file,
            "STUDENT|1|Alice|alice@example.com|CS101||90.0",
            "COURSE|CS101|Computer Science|",
        )
        manager = DataManager()
        data_io.load(manager, data_file)
        assert manager.find_course_by_code("CS101").enrolled_ids == [1]

    def test_roster_entry_for_student_of_other_course_dropped(self, data_io, data_file):
        write_lines(
            data_file,
            "STUDENT|1|Alice|alice@example.com|MATH201||90.0",
            "COURSE|CS101|Computer Science|1",
            "COURSE|MATH201|Mathematics|1",
        )
        manager = DataManager()
        data_io.load(manager, data_file)
        assert manager.find_course_by_code("CS101").enrolled_ids == []
        assert manager.find_course_by_code("MATH201").enrolled_ids == [1]

    def test_dangling_roster_id_kept(self, data_io, data_file):
        write_lines(data_file, "COURSE|CS101|Computer Science|1,99",
                    "STUDENT|1|Alice|alice@example.com|CS101||90.0")
        manager = DataManager()
        data_io.load(manager, data_file)
        assert manager.find_course_by_code("CS101").enrolled_ids == [1, 99]
        assert [s.id for s in manager.get_enrolled_students("CS101")] == [1]

    def test_unknown_course_leaves_student_unassigned(self, data_io, data_file, caplog):
        write_lines(data_file, "STUDENT|1|Alice|alice@example.com|BIO100||90.0")
        manager = DataManager()
        with caplog.at_level(logging.WARNING, logger="edurecords"):
            data_io.load(manager, data_file)
        assert manager.find_student_by_id(1).course is None
        assert "unknown course BIO100" in caplog.text

    def test_malformed_lines_skipped(self, data_io, data_file, caplog):
        write_lines(
            data_file,
            "STUDENT|1|Alice|alice@example.com|||90.0",
            "STUDENT|oops",
            "GARBAGE",
            "",
            "STAFF|101|Bob|bob@example.com|Lecturer|IT|",
        )
        manager = DataManager()
        with caplog.at_level(logging.WARNING, logger="edurecords"):
            result = data_io.load(manager, data_file)

        assert result.success is True
        assert [line for line, _ in result.skipped_lines] == [2, 3]
        assert "(2 line(s) skipped)" in result.message
        assert manager.student_count == 1
        assert manager.staff_count == 1
        assert "Skipping line 2 [FIELD_COUNT]" in caplog.text
        assert "Skipping line 3 [UNKNOWN_RECORD]" in caplog.text

    def test_staff_without_task_column(self, data_io, data_file):
        write_lines(data_file, "STAFF|101|Bob|bob@example.com|Lecturer|IT")
        manager = DataManager()
        data_io.load(manager, data_file)
        assert manager.find_staff_by_id(101).tasks == []

    def test_out_of_range_grade_dropped(self, data_io, data_file):
        write_lines(data_file, "STUDENT|1|Alice|alice@example.com||7,12,9|90.0")
        manager = DataManager()
        data_io.load(manager, data_file)
        assert manager.find_student_by_id(1).grades == [7, 9]

    def test_missing_file(self, data_io, tmp_path):
        manager = DataManager()
        result = data_io.load(manager, str(tmp_path / "nope.txt"))
        assert result.success is False
        assert result.message.startswith("Error loading data:")
        assert manager.is_empty()

    def test_merge_reports_duplicates(self, data_io, populated, data_file):
        data_io.save(populated, data_file)

        result = data_io.load(populated, data_file)

        assert result.success is True
        assert sorted(result.duplicates) == ["COURSE CS101", "STAFF 101", "STUDENT 1", "STUDENT 2"]
        assert "(4 duplicate(s) ignored)" in result.message
        assert populated.get_statistics() == {"students": 2, "staff": 1, "courses": 1}
        assert populated.find_course_by_code("CS101").enrolled_ids == [1]

    def test_merge_adds_new_records(self, data_io, populated, data_file):
        write_lines(data_file, "STUDENT|5|Eve|eve@example.com|CS101|6|91.0")
        data_io.load(populated, data_file)
        assert populated.find_student_by_id(5).course is populated.find_course_by_code("CS101")
        assert populated.find_course_by_code("CS101").enrolled_ids == [1, 5]

    def test_replace_clears_registry_first(self, data_io, populated, data_file):
        write_lines(data_file, "STUDENT|5|Eve|eve@example.com|||91.0")
        result = data_io.load(populated, data_file, replace=True)
        assert result.duplicates == []
        assert [s.id for s in populated.get_students()] == [5]
        assert populated.staff_count == 0
        assert populated.course_count == 0

    def test_failed_read_with_replace_keeps_registry(self, data_io, populated, tmp_path):
        data_io.load(populated, str(tmp_path / "nope.txt"), replace=True)
        assert populated.student_count == 2
