from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class VisualElement(CamelModel):
    type: str = "image"
    path: str
    description: str = ""


class Document(CamelModel):
    """A single extracted upload. Content is fixed once extraction finishes."""
    id: str
    file_name: str
    content: str = ""
    visual_elements: List[VisualElement] = Field(default_factory=list)
    file_type: str
    file_path: Optional[str] = Field(default=None, exclude=True)

    class Config:
        frozen = True

    @property
    def content_length(self) -> int:
        return len(self.content)

    def summary(self) -> "DocumentSummary":
        return DocumentSummary(
            id=self.id,
            file_name=self.file_name,
            content_length=self.content_length,
            file_type=self.file_type,
        )


class DocumentSummary(CamelModel):
    id: str
    file_name: str
    content_length: int
    file_type: str
