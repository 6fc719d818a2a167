from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from .document import Document


MULTI_DOCUMENT_SEPARATOR = "\n\n--- Document: {file_name} ---\n\n"


@dataclass
class Session:
    """
    Server-side record tying uploaded documents to a session id.

    Expires a fixed time after creation; access does not extend it.
    """
    session_id: str
    documents: List[Document] = field(default_factory=list)
    multi_document: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    ttl_seconds: int = 3600

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_seconds)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at

    @property
    def content(self) -> str:
        if not self.multi_document:
            return self.documents[0].content if self.documents else ""
        return "".join(
            f"{doc.content}{MULTI_DOCUMENT_SEPARATOR.format(file_name=doc.file_name)}"
            for doc in self.documents
        )

    @property
    def document_count(self) -> int:
        return len(self.documents) if self.multi_document else 1

    @property
    def has_multiple_sources(self) -> bool:
        return len(self.documents) > 1

    @property
    def visual_elements(self):
        return [element for doc in self.documents for element in doc.visual_elements]

    @property
    def file_paths(self) -> List[str]:
        paths = [doc.file_path for doc in self.documents if doc.file_path]
        paths.extend(element.path for element in self.visual_elements)
        return paths

    def add_document(self, document: Document) -> None:
        self.documents.append(document)
