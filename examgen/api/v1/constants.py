class ResponseMessages:
    FILE_UPLOADED = "File uploaded and processed successfully"
    FILES_UPLOADED = "Multiple documents uploaded and processed successfully"
    DOCUMENT_ADDED = "Document added successfully"
    EXAM_PAPER_GENERATED = "Exam paper generated successfully"
    AI_READY = "AI (Gemini) is ready"


class ErrorMessages:
    NO_FILE = "No file uploaded"
    NO_FILES = "No files uploaded"
    TOO_MANY_FILES = "Too many files uploaded"
    FILE_PROCESSING = "Error processing file"
    FILES_PROCESSING = "Error processing files"
    ADD_DOCUMENT = "Error adding document"
    MULTI_DOCUMENT_SESSION_NOT_FOUND = "Multi-document session not found"
    GENERATE_QUESTIONS = "Error generating questions"
    NO_CONTENT = "No content provided"
    TEST_AI_GENERATION = "Error testing AI generation"
    ANALYZE_CONTENT = "Error analyzing content"
    GENERATE_EXAM_PAPER = "Error generating exam paper"
    NO_EXAM_PAPER = "No exam paper data provided"
    GENERATE_PDF = "Error generating PDF"
    INVALID_API_KEY = "Invalid API key or API error"
    SUPPORT_SUGGESTION = "Please try again or contact support"


class PreviewLength:
    TEST_AI_GENERATION = 200
    ANALYZE_CONTENT = 500


class ExportMediaType:
    PDF = "application/pdf"
    HTML = "text/html"
