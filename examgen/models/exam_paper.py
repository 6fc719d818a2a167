import datetime
from typing import Dict, List, Union

from pydantic import Field

from .base import CamelModel
from .question import Question


def _today() -> str:
    return datetime.date.today().strftime("%m/%d/%Y")


class ExamConfig(CamelModel):
    institution_name: str = "Kalasalingam Academy of Research and Education"
    course_code: str = "CS101"
    course_name: str = "Computer Science Fundamentals"
    degree: str = "B.Tech"
    semester: str = "I"
    exam_session: str = "Seasonal Examination – December 2024"
    duration: str = "90 Minutes"
    date: str = Field(default_factory=_today)
    max_marks: Union[int, float, str] = 50


class ExamPart(CamelModel):
    name: str
    description: str
    questions: List[Question] = Field(default_factory=list)


class LevelSummary(CamelModel):
    count: int
    marks: int
    code: str


class ExamPaper(CamelModel):
    header: ExamConfig
    parts: List[ExamPart]
    summary: Dict[str, LevelSummary]

    @property
    def total_marks(self) -> int:
        return sum(part_summary.marks for part_summary in self.summary.values())
