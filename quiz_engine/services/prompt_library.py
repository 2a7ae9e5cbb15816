# quiz_engine/services/prompt_library.py
from langchain_core.prompts import ChatPromptTemplate

DIFFICULTY_DESCRIPTIONS = {
    "easy": "basic",
    "medium": "intermediate",
    "hard": "advanced",
}

SYSTEM_PROMPT = "You create high-quality multiple-choice questions with 4 options. Return ONLY valid JSON."

QUESTION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human",
     """Generate {count} multiple-choice questions on "{topic}" at {difficulty} ({difficulty_description}) difficulty.
- Language: {language}.
- Each question has exactly 4 short, distinct options (plain strings).
- Exactly one correct option.
- Include a brief explanation.
- Avoid "All of the above"/"None of the above" and repetitions.
Return ONLY JSON array with objects: {{"question","options","answer","explanation"}}. No markdown."""),
])


def prompt_variables(topic: str, difficulty: str, count: int, language: str) -> dict:
    """Builds the input mapping for QUESTION_PROMPT."""
    return {
        "topic": topic,
        "difficulty": difficulty,
        "difficulty_description": DIFFICULTY_DESCRIPTIONS.get(difficulty, difficulty),
        "count": count,
        "language": language,
    }
