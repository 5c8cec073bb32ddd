"""
Line records of the data file.

Each model mirrors one record type of the pipe-delimited format and knows how
to render itself as a line and how to validate the fields of a parsed line.
"""

from typing import ClassVar, List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from ..core.entities import Student, Staff, Course
from ..core.enums import RecordType, FIELD_SEPARATOR, VALUE_SEPARATOR
from ..core.exceptions import RecordFormatError


def _check_field(value: str, field_name: str) -> str:
    if FIELD_SEPARATOR in value or "\n" in value or "\r" in value:
        raise RecordFormatError(
            f"{field_name} {value!r} contains a reserved character ('|' or a line break)",
            error_code="RESERVED_CHARACTER",
        )
    return value


def _join_values(values: List[str], field_name: str) -> str:
    for value in values:
        _check_field(value, field_name)
        if VALUE_SEPARATOR in value:
            raise RecordFormatError(f"{field_name} entry {value!r} contains a comma",
                                   error_code="RESERVED_CHARACTER")
    return VALUE_SEPARATOR.join(values)


def split_values(field: str) -> List[str]:
    """Split a comma-joined field; an empty field holds no values."""
    if not field:
        return []
    return field.split(VALUE_SEPARATOR)


def _validate(model, line_number: Optional[int], **fields):
    try:
        return model(**fields)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise RecordFormatError(f"Invalid {model.record_type.value} record: {problems}",
                                line_number=line_number, error_code="INVALID_VALUE")


def _check_field_count(fields: List[str], allowed: tuple, record_type: RecordType,
                       line_number: Optional[int]) -> None:
    if len(fields) not in allowed:
        raise RecordFormatError(
            f"{record_type.value} record needs {' or '.join(str(n) for n in allowed)} "
            f"fields, found {len(fields)}",
            line_number=line_number,
            error_code="FIELD_COUNT",
        )


class StudentRecord(BaseModel):
    """STUDENT|id|name|email|courseCode|gradesCSV|attendancePercentage"""

    record_type: ClassVar[RecordType] = RecordType.STUDENT

    id: int
    name: str = Field(..., min_length=1)
    email: str = ""
    course_code: Optional[str] = None
    grades: List[int] = Field(default_factory=list)
    attendance_percentage: float = Field(..., ge=0, le=100)

    @classmethod
    def from_student(cls, student: Student) -> "StudentRecord":
        return cls(
            id=student.id,
            name=student.name,
            email=student.email,
            course_code=student.course_code,
            grades=student.grades,
            attendance_percentage=student.attendance_percentage,
        )

    @classmethod
    def from_fields(cls, fields: List[str], line_number: Optional[int] = None) -> "StudentRecord":
        _check_field_count(fields, (7,), cls.record_type, line_number)
        return _validate(
            cls, line_number,
            id=fields[1],
            name=fields[2],
            email=fields[3],
            course_code=fields[4] or None,
            grades=split_values(fields[5]),
            attendance_percentage=fields[6],
        )

    def to_line(self) -> str:
        return FIELD_SEPARATOR.join([
            self.record_type.value,
            str(self.id),
            _check_field(self.name, "Name"),
            _check_field(self.email, "Email"),
            _check_field(self.course_code or "", "Course code"),
            VALUE_SEPARATOR.join(str(grade) for grade in self.grades),
            repr(self.attendance_percentage),
        ])


class StaffRecord(BaseModel):
    """STAFF|id|name|email|role|department|tasksCSV"""

    record_type: ClassVar[RecordType] = RecordType.STAFF

    id: int
    name: str = Field(..., min_length=1)
    email: str = ""
    role: str = ""
    department: str = ""
    tasks: List[str] = Field(default_factory=list)

    @classmethod
    def from_staff(cls, staff: Staff) -> "StaffRecord":
        return cls(
            id=staff.id,
            name=staff.name,
            email=staff.email,
            role=staff.role or "",
            department=staff.department or "",
            tasks=staff.tasks,
        )

    @classmethod
    def from_fields(cls, fields: List[str], line_number: Optional[int] = None) -> "StaffRecord":
        # Files written without a task column are accepted
        _check_field_count(fields, (6, 7), cls.record_type, line_number)
        return _validate(
            cls, line_number,
            id=fields[1],
            name=fields[2],
            email=fields[3],
            role=fields[4],
            department=fields[5],
            tasks=split_values(fields[6]) if len(fields) > 6 else [],
        )

    def to_line(self) -> str:
        return FIELD_SEPARATOR.join([
            self.record_type.value,
            str(self.id),
            _check_field(self.name, "Name"),
            _check_field(self.email, "Email"),
            _check_field(self.role, "Role"),
            _check_field(self.department, "Department"),
            _join_values(self.tasks, "Task"),
        ])


class CourseRecord(BaseModel):
    """COURSE|code|title|enrolledIdsCSV"""

    record_type: ClassVar[RecordType] = RecordType.COURSE

    code: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    enrolled_ids: List[int] = Field(default_factory=list)

    @classmethod
    def from_course(cls, course: Course) -> "CourseRecord":
        return cls(code=course.code, title=course.title, enrolled_ids=course.enrolled_ids)

    @classmethod
    def from_fields(cls, fields: List[str], line_number: Optional[int] = None) -> "CourseRecord":
        _check_field_count(fields, (3, 4), cls.record_type, line_number)
        return _validate(
            cls, line_number,
            code=fields[1],
            title=fields[2],
            enrolled_ids=split_values(fields[3]) if len(fields) > 3 else [],
        )

    def to_line(self) -> str:
        return FIELD_SEPARATOR.join([
            self.record_type.value,
            _check_field(self.code, "Course code"),
            _check_field(self.title, "Course title"),
            VALUE_SEPARATOR.join(str(student_id) for student_id in self.enrolled_ids),
        ])


RECORD_MODELS = {
    RecordType.STUDENT: StudentRecord,
    RecordType.STAFF: StaffRecord,
    RecordType.COURSE: CourseRecord,
}


def parse_line(line: str, line_number: Optional[int] = None) -> BaseModel:
    """Turn one line of the data file into its record model."""
    fields = line.split(FIELD_SEPARATOR)
    try:
        record_type = RecordType(fields[0])
    except ValueError:
        raise RecordFormatError(f"Unknown record type {fields[0]!r}", line_number=line_number,
                               error_code="UNKNOWN_RECORD")
    return RECORD_MODELS[record_type].from_fields(fields, line_number)
