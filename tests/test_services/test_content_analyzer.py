import pytest

from examgen.services.content_analyzer import (
    SECTION_PLACEHOLDER,
    analyze_content,
    keyword_frequencies,
    split_content_into_sections,
    split_sentences,
)


class TestAnalyzeContent:
    def test_key_terms_ranked_by_frequency(self, sample_content):
        analysis = analyze_content(sample_content)

        assert analysis.key_terms[0] == "photosynthesis" or analysis.key_terms[0] == "energy"
        assert "glucose" in analysis.key_terms
        assert len(analysis.key_terms) <= 15
        assert analysis.main_topics == analysis.key_terms[:5]
        assert analysis.main_topic == analysis.key_terms[0]

    def test_ties_keep_first_seen_order(self):
        analysis = analyze_content("zeta cell zeta cell mitosis")

        assert analysis.key_terms == ["zeta", "cell", "mitosis"]

    def test_stop_words_and_short_words_excluded(self):
        analysis = analyze_content("These cells would divide; the cell has DNA and RNA within them.")

        assert "these" not in analysis.key_terms
        assert "would" not in analysis.key_terms
        assert "within" not in analysis.key_terms
        assert "dna" not in analysis.key_terms
        assert "cells" in analysis.key_terms

    def test_definitions_and_important_sentences(self, sample_content):
        analysis = analyze_content(sample_content)

        assert any(s.startswith("Photosynthesis is a process") for s in analysis.definitions)
        assert analysis.important_sentences
        assert analysis.total_sentences == len(split_sentences(sample_content))
        assert analysis.total_words > analysis.unique_words > 0

    @pytest.mark.parametrize("text", ["", None, "   "])
    def test_empty_input_does_not_raise(self, text):
        analysis = analyze_content(text)

        assert analysis.key_terms == []
        assert analysis.main_topic is None

    def test_deterministic(self, sample_content):
        assert analyze_content(sample_content) == analyze_content(sample_content)


class TestSections:
    def test_split_on_blank_lines(self, sample_content):
        sections = split_content_into_sections(sample_content)

        assert len(sections) == 3
        assert all(len(section.strip()) > 50 for section in sections)

    @pytest.mark.parametrize("text", ["", None, "Too short.\n\nAlso short."])
    def test_placeholder_when_nothing_usable(self, text):
        assert split_content_into_sections(text) == [SECTION_PLACEHOLDER]

    def test_short_sentences_dropped(self):
        assert split_sentences("Short one. This sentence is definitely long enough!") == [
            "This sentence is definitely long enough"
        ]


class TestKeywordFrequencies:
    def test_counts_keep_stop_words(self):
        ranked, total_words, unique_words = keyword_frequencies("that that that cell is ok")

        assert ranked == [("that", 3), ("cell", 1)]
        assert total_words == 6
        assert unique_words == 2

    def test_limit_applied(self, sample_content):
        ranked, _, unique_words = keyword_frequencies(sample_content, limit=5)

        assert len(ranked) == 5
        assert unique_words > 5

    def test_empty_content(self):
        assert keyword_frequencies(None) == ([], 0, 0)
