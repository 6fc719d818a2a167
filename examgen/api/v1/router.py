from fastapi import APIRouter

from .endpoints import documents, exam_paper, questions

api_router = APIRouter()

# Document ingest and session lookup (e.g. /api/upload, /api/documents/{session_id})
api_router.include_router(documents.router, tags=["documents"])

# Question generation and content analysis (e.g. /api/generate-questions)
api_router.include_router(questions.router, tags=["questions"])

# Exam paper assembly and export (e.g. /api/generate-exam-paper, /api/export-pdf)
api_router.include_router(exam_paper.router, tags=["exam-paper"])
