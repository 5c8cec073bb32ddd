"""
Main entry point for EduRecords.
"""

import os
import sys
from datetime import date, timedelta
from typing import Optional, TextIO, Union

from .config import AppConfig, load_config
from .core.entities import Student, Staff, Course
from .core.exceptions import ConfigurationError
from .persistence import DataIO
from .services import DataManager, ReportManager
from .ui import InputReader, MenuContext, MainMenu
from .utils.logger import setup_logger


class EduRecordsApp:
    """Wires the registry, codec and console menus together."""

    def __init__(self, config: Optional[Union[AppConfig, dict]] = None,
                 input_stream: Optional[TextIO] = None,
                 output_stream: Optional[TextIO] = None):
        if isinstance(config, AppConfig):
            self._config = config
        else:
            self._config = load_config(overrides=config or {}, environ={})
        self._output = output_stream if output_stream is not None else sys.stdout
        self._logger = setup_logger(level=self._config.log_level, log_file=self._config.log_file)

        self._manager = DataManager()
        self._data_io = DataIO()
        self._reader = InputReader(input_stream, self._output, escape_word=self._config.escape_word)
        self._context = MenuContext(
            manager=self._manager,
            reader=self._reader,
            data_io=self._data_io,
            data_file=self._config.data_file,
        )

        if self._config.autoload:
            self._autoload()

    @property
    def manager(self) -> DataManager:
        return self._manager

    @property
    def config(self) -> AppConfig:
        return self._config

    def _say(self, text: str = "") -> None:
        print(text, file=self._output)

    def _autoload(self) -> None:
        path = self._config.data_file
        if not os.path.exists(path):
            self._logger.info("No data file at %s; starting empty", path)
            return
        result = self._data_io.load(self._manager, path)
        self._say(result.message)

    def run(self) -> None:
        """Run the main menu until the operator exits."""
        self._say("Welcome to EduRecords.")
        self._say(f"Type '{self._config.escape_word}' at any prompt to return to the main menu.")

        running = True
        while running:
            running = MainMenu(self._context).show()

        self._say("\nGoodbye!")

    def create_sample_data(self) -> None:
        """Populate the registry with a small demonstration data set."""
        self._say("Creating sample data...")

        cs101 = Course("CS101", "Introduction to Computer Science")
        math201 = Course("MATH201", "Further Mathematics")
        self._manager.add_course(cs101)
        self._manager.add_course(math201)

        students = [
            (Student(1, "Alice Johnson", "alice@university.edu", cs101, 97.5), [7, 9, 8]),
            (Student(2, "Bob Smith", "bob@university.edu", cs101, 88.0), [5, 6]),
            (Student(3, "Carol Davis", "carol@university.edu", math201, 92.25), [9]),
            (Student(4, "Dan Brown", "dan@university.edu"), []),
        ]
        for student, grades in students:
            for grade in grades:
                student.add_grade(grade)
            self._manager.add_student(student)

        staff = Staff(101, "Erin Clarke", "erin@university.edu", "Lecturer", "Computing")
        staff.assign_task("Prepare lesson plan", date.today() + timedelta(days=7))
        staff.assign_task("Mark coursework", date.today() + timedelta(days=21))
        self._manager.add_staff(staff)
        self._manager.add_staff(Staff(102, "Frank Moore", "frank@university.edu", "Registrar", "Admissions"))

        self._say(f"✓ Sample data created: {self._manager.get_statistics()}")

    def run_demo(self) -> None:
        """Create sample data, print both reports and save it to the data file."""
        self._say("Running EduRecords demonstration...")
        self.create_sample_data()

        reports = ReportManager(self._manager)
        self._say(reports.build_grades_report())
        self._say(reports.build_attendance_report())

        result = self._data_io.save(self._manager, self._config.data_file)
        self._say(result.message)
        self._say("\n✓ Demo completed")


def main(argv=None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="EduRecords student, staff and course records manager")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON)")
    parser.add_argument("--data-file", type=str, help="File used by Save/Load")
    parser.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--log-file", type=str, help="Write logs to this file as well")
    parser.add_argument("--load", action="store_true", default=None, help="Load the data file on start-up")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, overrides={
            "data_file": args.data_file,
            "log_level": args.log_level,
            "log_file": args.log_file,
            "autoload": args.load,
        })
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    app = EduRecordsApp(config)

    try:
        if args.demo:
            app.run_demo()
        else:
            app.run()
    except KeyboardInterrupt:
        print("\nShutting down...")

    return 0


if __name__ == "__main__":
    sys.exit(main())
