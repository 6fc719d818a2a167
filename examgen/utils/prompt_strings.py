class PromptStrings:
    BLOOM_QUESTION_SYSTEM = (
        "You are an expert educational content creator specializing in creating questions "
        "based on Bloom's Taxonomy."
    )

    BLOOM_QUESTIONS = """CONTENT TO ANALYZE:
{content}

REQUIREMENTS:
- Total Questions: {total_questions}
- Question Types: {question_types}
- Bloom's Taxonomy Distribution: {bloom_distribution}
- Questions per Bloom level: {level_counts}
- Difficulty Level: {difficulty}
- Course Outcomes: {course_outcomes}

INSTRUCTIONS:
1. Analyze the provided content thoroughly
2. Generate questions that are directly based on the content
3. Ensure questions are relevant and accurate to the source material
4. Create questions for each Bloom's Taxonomy level as specified in the distribution
5. Include 4 options for multiple choice questions with only one correct answer
6. Provide detailed explanations for correct answers
7. For each question, provide a comprehensive answer that explains the reasoning
8. IMPORTANT: You must respond with ONLY a valid JSON object, no additional text

RESPONSE FORMAT (JSON ONLY):
{{
  "questions": [
    {{
      "id": "Q1",
      "question": "Question text here",
      "type": "multiple-choice",
      "bloomLevel": "REMEMBER",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": "Correct answer text",
      "explanation": "Detailed explanation of why this is correct",
      "answer": "Comprehensive answer with step-by-step reasoning and key concepts",
      "marks": 2,
      "difficulty": "{difficulty}"
    }}
  ],
  "summary": {{
    "totalQuestions": {total_questions},
    "bloomDistribution": "{bloom_distribution}",
    "totalMarks": {total_marks}
  }}
}}

CRITICAL: Respond with ONLY the JSON object above. No additional text, explanations, or formatting."""

    NO_CONTENT = "No content provided"
    NO_COURSE_OUTCOMES = "Not specified"
