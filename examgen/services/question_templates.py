"""
Question wording for rule-based generation.

TEMPLATES maps every supported (BloomLevel, QuestionType) pair to a function
taking the content analysis of one section and a flag telling whether the
session spans several documents. SUPPORTED_TYPES lists, per level, the types
it accepts; the first entry is the level default. The two are checked against
each other when this module is imported.
"""

from typing import Callable, Dict, List, Tuple

from ..models.bloom import BloomLevel
from ..models.question import QuestionType
from .content_analyzer import ContentAnalysis


TemplateFn = Callable[[ContentAnalysis, bool], str]

MCQ = QuestionType.MULTIPLE_CHOICE
TF = QuestionType.TRUE_FALSE
SA = QuestionType.SHORT_ANSWER
ESSAY = QuestionType.ESSAY
FB = QuestionType.FILL_BLANK

SUPPORTED_TYPES: Dict[BloomLevel, List[QuestionType]] = {
    BloomLevel.REMEMBER: [MCQ, TF, SA, FB],
    BloomLevel.UNDERSTAND: [MCQ, TF, SA, ESSAY],
    BloomLevel.APPLY: [MCQ, SA, ESSAY],
    BloomLevel.ANALYZE: [MCQ, SA, ESSAY],
    BloomLevel.EVALUATE: [MCQ, SA, ESSAY],
    BloomLevel.CREATE: [SA, ESSAY],
}


def _fixed(single: str, multi: str) -> TemplateFn:
    def template(analysis: ContentAnalysis, multi_document: bool) -> str:
        return multi if multi_document else single
    return template


# Remember

def remember_mcq(analysis: ContentAnalysis, multi_document: bool) -> str:
    terms = analysis.key_terms
    if len(terms) < 2:
        return "What is the main topic discussed in this content?"

    choices = f"{terms[0]}, {terms[1]}, {terms[2] if len(terms) > 2 else 'concept'}, or {terms[3] if len(terms) > 3 else 'element'}"
    if multi_document:
        return f"Which of the following terms appears most frequently across all documents: {choices}?"
    return f"Which of the following terms is most frequently mentioned in the document: {choices}?"


def remember_tf(analysis: ContentAnalysis, multi_document: bool) -> str:
    topics = analysis.main_topics
    if len(topics) < 2:
        return "The document discusses important concepts related to the main topic."
    if multi_document:
        return f"The documents primarily discuss {topics[0]} and {topics[1]} across multiple sources."
    return f"The document primarily discusses {topics[0]} and {topics[1]}."


# Understand

def understand_mcq(analysis: ContentAnalysis, multi_document: bool) -> str:
    terms = analysis.key_terms
    if len(terms) < 2:
        return "Which statement best explains the main concept discussed in this content?"
    source = "the documents" if multi_document else "the document"
    return f"Based on {source}, which statement best explains the relationship between {terms[0]} and {terms[1]}?"


def understand_tf(analysis: ContentAnalysis, multi_document: bool) -> str:
    terms = analysis.key_terms
    if len(terms) < 2:
        return "The document explains important concepts clearly."
    subject = "The documents explain" if multi_document else "The document explains"
    return f"{subject} that {terms[0]} is essential for understanding {terms[1]}."


TEMPLATES: Dict[Tuple[BloomLevel, QuestionType], TemplateFn] = {
    (BloomLevel.REMEMBER, MCQ): remember_mcq,
    (BloomLevel.REMEMBER, TF): remember_tf,
    (BloomLevel.REMEMBER, SA): _fixed(
        "List the main topics and key concepts discussed in this document.",
        "List the main topics and key concepts discussed across all the uploaded documents.",
    ),
    (BloomLevel.REMEMBER, FB): _fixed(
        "The document focuses on _____ and its applications.",
        "The documents collectively focus on _____ and its applications.",
    ),

    (BloomLevel.UNDERSTAND, MCQ): understand_mcq,
    (BloomLevel.UNDERSTAND, TF): understand_tf,
    (BloomLevel.UNDERSTAND, SA): _fixed(
        "Explain the main concepts and their relationships as discussed in this document in your own words.",
        "Explain the main concepts and their relationships as discussed across all documents in your own words.",
    ),
    (BloomLevel.UNDERSTAND, ESSAY): _fixed(
        "Describe and explain the key concepts and their relationships as presented in the document.",
        "Describe and explain the key concepts and their relationships as presented across all documents.",
    ),

    (BloomLevel.APPLY, MCQ): _fixed(
        "How would you apply the principles discussed in this document to solve a real-world problem?",
        "How would you apply the principles discussed across all documents to solve a real-world problem?",
    ),
    (BloomLevel.APPLY, SA): _fixed(
        "Apply the concepts from this document to create a practical solution for a given scenario.",
        "Apply the concepts from all documents to create a practical solution for a given scenario.",
    ),
    (BloomLevel.APPLY, ESSAY): _fixed(
        "Demonstrate how the concepts discussed in this document can be applied in a real-world situation.",
        "Demonstrate how the concepts discussed across all documents can be applied in a real-world situation.",
    ),

    (BloomLevel.ANALYZE, MCQ): _fixed(
        "Which of the following best analyzes the structure and organization of ideas in this document?",
        "Which of the following best analyzes the relationships between concepts across all documents?",
    ),
    (BloomLevel.ANALYZE, SA): _fixed(
        "Analyze the differences and similarities between the main concepts discussed in this document.",
        "Analyze the differences and similarities between the main concepts discussed across all documents.",
    ),
    (BloomLevel.ANALYZE, ESSAY): _fixed(
        "Analyze the structure, organization, and relationships between the ideas presented in this document.",
        "Analyze the structure, organization, and relationships between the ideas presented across all documents.",
    ),

    (BloomLevel.EVALUATE, MCQ): _fixed(
        "Which argument presented in the document is most convincing based on the evidence provided?",
        "Which argument presented across all documents is most convincing based on the evidence provided?",
    ),
    (BloomLevel.EVALUATE, SA): _fixed(
        "Evaluate the effectiveness of the approaches and methods described in this document.",
        "Evaluate the effectiveness of the approaches and methods described across all documents.",
    ),
    (BloomLevel.EVALUATE, ESSAY): _fixed(
        "Evaluate the strengths and weaknesses of the arguments and evidence presented in this document.",
        "Evaluate the strengths and weaknesses of the arguments and evidence presented across all documents.",
    ),

    (BloomLevel.CREATE, SA): _fixed(
        "Design a new solution or approach based on the principles and concepts discussed in this document.",
        "Design a new solution or approach based on the principles and concepts discussed across all documents.",
    ),
    (BloomLevel.CREATE, ESSAY): _fixed(
        "Create a comprehensive plan or proposal that builds upon the concepts and ideas presented in this document.",
        "Create a comprehensive plan or proposal that builds upon the concepts and ideas presented across all documents.",
    ),
}


def validate_templates() -> None:
    expected = {(level, qtype) for level, types in SUPPORTED_TYPES.items() for qtype in types}
    missing = expected - TEMPLATES.keys()
    unexpected = TEMPLATES.keys() - expected
    if missing or unexpected or set(SUPPORTED_TYPES) != set(BloomLevel):
        raise RuntimeError(
            f"Question template table is inconsistent: missing={sorted(missing)}, "
            f"unexpected={sorted(unexpected)}"
        )


def render_template(level: BloomLevel, question_type: QuestionType,
                    analysis: ContentAnalysis, multi_document: bool) -> str:
    return TEMPLATES[(level, question_type)](analysis, multi_document)


validate_templates()
