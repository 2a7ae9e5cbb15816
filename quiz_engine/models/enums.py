# quiz_engine/models/enums.py
from enum import Enum

class Difficulty(str, Enum):
    """Difficulty levels a quiz can be generated at."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

class Language(str, Enum):
    """Languages the generator is asked to write questions in."""
    ENGLISH = "english"
    HINDI = "hindi"
    BENGALI = "bengali"
