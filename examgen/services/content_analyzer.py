import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


SECTION_PLACEHOLDER = "Sample content section for question generation"

KEY_TERM_LIMIT = 15
MAIN_TOPIC_LIMIT = 5
MIN_SENTENCE_LENGTH = 20
MIN_SECTION_LENGTH = 50
MIN_TERM_LENGTH = 4

DEFINITION_MARKERS = ("is a", "refers to", "defined as", "means")

STOP_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does",
    "did", "will", "would", "could", "should", "may", "might", "can", "this",
    "that", "these", "those", "a", "an", "as", "from", "into", "through",
    "during", "before", "after", "above", "below", "between", "among", "within",
    "without", "against", "toward", "towards", "upon", "about", "over", "under",
    "again", "further", "then", "once", "here", "there", "when", "where", "why",
    "how", "all", "any", "both", "each", "few", "more", "most", "other", "some",
    "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too",
    "very", "you", "your", "yours", "yourself", "yourselves", "i", "me", "my",
    "myself", "we", "our", "ours", "ourselves", "what", "which", "who", "whom",
    "whose", "whichever", "whoever", "whomever", "am", "being", "having",
    "doing", "must", "shall",
})

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WORD = re.compile(r"\b\w+\b")


@dataclass
class ContentAnalysis:
    key_terms: List[str] = field(default_factory=list)
    main_topics: List[str] = field(default_factory=list)
    important_sentences: List[str] = field(default_factory=list)
    definitions: List[str] = field(default_factory=list)
    total_sentences: int = 0
    total_words: int = 0
    unique_words: int = 0

    @property
    def main_topic(self) -> Optional[str]:
        return self.main_topics[0] if self.main_topics else None


def split_sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if len(s.strip()) > MIN_SENTENCE_LENGTH]


def tokenize(text: str) -> List[str]:
    return _WORD.findall(text.lower())


def term_frequencies(words: List[str]) -> Counter:
    """Counts content words. Counter keeps first-seen order, which breaks ties below."""
    return Counter(w for w in words if len(w) >= MIN_TERM_LENGTH and w not in STOP_WORDS)


def analyze_content(text: Optional[str]) -> ContentAnalysis:
    """
    Term-frequency analysis of raw text.

    Deterministic for a given input: key terms are ranked by frequency and
    ties keep the order in which the terms first appeared.
    """
    if not text or not isinstance(text, str):
        return ContentAnalysis()

    sentences = split_sentences(text)
    words = tokenize(text)
    frequencies = term_frequencies(words)

    ranked = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)
    key_terms = [term for term, _ in ranked[:KEY_TERM_LIMIT]]

    important_sentences = [
        sentence for sentence in sentences
        if any(term in sentence.lower() for term in key_terms)
    ]
    definitions = [
        sentence for sentence in sentences
        if any(marker in sentence.lower() for marker in DEFINITION_MARKERS)
    ]

    return ContentAnalysis(
        key_terms=key_terms,
        main_topics=key_terms[:MAIN_TOPIC_LIMIT],
        important_sentences=important_sentences,
        definitions=definitions,
        total_sentences=len(sentences),
        total_words=len(words),
        unique_words=len(frequencies),
    )


def split_content_into_sections(text: Optional[str]) -> List[str]:
    if not text or not isinstance(text, str):
        return [SECTION_PLACEHOLDER]

    sections = [p for p in text.split("\n\n") if len(p.strip()) > MIN_SECTION_LENGTH]
    return sections or [SECTION_PLACEHOLDER]


def keyword_frequencies(text: Optional[str], limit: int = 20) -> Tuple[List[Tuple[str, int]], int, int]:
    """
    Raw keyword counts for the content-analysis debug view.

    Only the length filter applies here, stop words are kept.
    Returns (top terms with counts, total words, unique counted words).
    """
    words = tokenize(text or "")
    counts = Counter(w for w in words if len(w) >= MIN_TERM_LENGTH)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit], len(words), len(counts)
