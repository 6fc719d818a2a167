from enum import Enum
from typing import Any, Dict


class BloomLevel(str, Enum):
    """Bloom's Taxonomy levels, declared in ascending cognitive order."""
    REMEMBER = "REMEMBER"
    UNDERSTAND = "UNDERSTAND"
    APPLY = "APPLY"
    ANALYZE = "ANALYZE"
    EVALUATE = "EVALUATE"
    CREATE = "CREATE"

    @property
    def display_name(self) -> str:
        return BLOOM_LEVEL_INFO[self]["name"]

    @property
    def code(self) -> str:
        return BLOOM_LEVEL_INFO[self]["code"]

    @property
    def description(self) -> str:
        return BLOOM_LEVEL_INFO[self]["description"]

    @property
    def base_marks(self) -> int:
        return BLOOM_LEVEL_INFO[self]["base_marks"]

    @classmethod
    def coerce(cls, value: Any, default: "BloomLevel" = None) -> "BloomLevel":
        """Lenient parse used on model output ("remember", " Apply ")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        return default or cls.REMEMBER


BLOOM_LEVEL_INFO: Dict[BloomLevel, Dict[str, Any]] = {
    BloomLevel.REMEMBER: {
        "name": "Remember",
        "code": "CO1",
        "description": "Recall facts and basic concepts",
        "base_marks": 2,
    },
    BloomLevel.UNDERSTAND: {
        "name": "Understand",
        "code": "CO2",
        "description": "Explain ideas and concepts",
        "base_marks": 3,
    },
    BloomLevel.APPLY: {
        "name": "Apply",
        "code": "CO3",
        "description": "Use information in new situations",
        "base_marks": 4,
    },
    BloomLevel.ANALYZE: {
        "name": "Analyze",
        "code": "CO4",
        "description": "Draw connections among ideas",
        "base_marks": 5,
    },
    BloomLevel.EVALUATE: {
        "name": "Evaluate",
        "code": "CO5",
        "description": "Justify a stand or decision",
        "base_marks": 6,
    },
    BloomLevel.CREATE: {
        "name": "Create",
        "code": "CO6",
        "description": "Produce new or original work",
        "base_marks": 8,
    },
}


class DistributionPolicy(str, Enum):
    BALANCED = "balanced"
    FOUNDATIONAL = "foundational"
    ADVANCED = "advanced"

    @classmethod
    def coerce(cls, value: Any) -> "DistributionPolicy":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.BALANCED
