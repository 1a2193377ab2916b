from .base import DEMO_SUBMISSION_LIMIT, InvalidVariant, PromptTemplate, SectionService
from .listening import ListeningService
from .reading import ReadingService
from .writing import WritingService

__all__ = [
    "DEMO_SUBMISSION_LIMIT",
    "InvalidVariant",
    "ListeningService",
    "PromptTemplate",
    "ReadingService",
    "SectionService",
    "WritingService",
]
