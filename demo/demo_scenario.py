#!/usr/bin/env python3
"""
Demo scenario for EduRecords: build a registry, save it, reload it and compare.
"""

import os
import sys
import tempfile

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from edurecords.core import Course
from edurecords.main import EduRecordsApp
from edurecords.persistence import DataIO
from edurecords.services import DataManager, ReportManager


def run_demo():
    """Run a walk-through of the records manager."""
    print("=" * 60)
    print("EDURECORDS - DEMO")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as workdir:
        data_file = os.path.join(workdir, "demo_records.txt")
        app = EduRecordsApp({"data_file": data_file})

        try:
            print("\n1. Creating sample data...")
            app.create_sample_data()

            print("\n2. Demonstrating enrollment changes...")
            demonstrate_enrollment(app.manager)

            print("\n3. Saving and reloading...")
            reloaded = demonstrate_round_trip(app.manager, data_file)

            print("\n4. Reports from the reloaded registry...")
            reports = ReportManager(reloaded)
            print(reports.build_grades_report())
            print(reports.build_attendance_report())

            print("=" * 60)
            print("DEMO COMPLETED SUCCESSFULLY!")
            print("=" * 60)

        except Exception as e:
            print(f"\nDemo failed with error: {e}")
            import traceback
            traceback.print_exc()


def demonstrate_enrollment(manager: DataManager):
    """Move a student between courses and remove a course."""
    dan = manager.find_student_by_id(4)
    print(f"  Enrolling {dan.name} in MATH201")
    manager.enrol_student(dan.id, "math201")
    print(f"    MATH201 roster: {manager.find_course_by_code('MATH201').enrolled_ids}")

    print(f"  Moving {dan.name} to CS101")
    manager.enrol_student(dan.id, "CS101")
    print(f"    CS101 roster: {manager.find_course_by_code('CS101').enrolled_ids}")
    print(f"    MATH201 roster: {manager.find_course_by_code('MATH201').enrolled_ids}")

    print("  Adding and removing a temporary course")
    manager.add_course(Course("TMP100", "Temporary"))
    manager.enrol_student(dan.id, "TMP100")
    manager.remove_course_by_code("tmp100")
    print(f"    {dan.name} course after removal: {dan.course_code}")
    manager.enrol_student(dan.id, "CS101")


def demonstrate_round_trip(manager: DataManager, data_file: str) -> DataManager:
    """Save the registry and load it into a fresh one."""
    data_io = DataIO()
    saved = data_io.save(manager, data_file)
    print(f"  {saved.message}")

    with open(data_file, "r", encoding="utf-8") as f:
        for line in f:
            print(f"    {line.rstrip()}")

    reloaded = DataManager()
    loaded = data_io.load(reloaded, data_file)
    print(f"  {loaded.message}")
    print(f"  Before: {manager.get_statistics()}")
    print(f"  After:  {reloaded.get_statistics()}")

    for student in manager.get_students():
        copy = reloaded.find_student_by_id(student.id)
        same = (copy is not None
                and copy.course_code == student.course_code
                and copy.grades == student.grades
                and copy.attendance_percentage == student.attendance_percentage)
        print(f"    Student {student.id}: {'✓' if same else '✗'}")
    return reloaded


if __name__ == "__main__":
    run_demo()
