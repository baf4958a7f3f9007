"""
Static questionnaire catalogue: question sets per role and UI languages.

Question labels are the canonical English prompts; field keys double as
the spreadsheet column names and the AnswerStore keys.
"""

from src.core.exceptions import UnsupportedLanguageError
from src.core.models import Language, Question, Role

CANONICAL_LANGUAGE = "en"

JOB_SEEKER_QUESTIONS: tuple[tuple[str, str], ...] = (
    ("name", "What is your full name?"),
    ("education", "What is your educational background?"),
    ("age", "What is your age?"),
    ("location", "Where are you located?"),
    ("pastJobs", "Tell me about your past jobs."),
)

EMPLOYER_QUESTIONS: tuple[tuple[str, str], ...] = (
    ("companyName", "What is your company name?"),
    ("jobTitle", "What position are you hiring for?"),
    ("requirements", "What are the key requirements for this role?"),
    ("experience", "How many years of experience are required?"),
    ("location", "Where is the job location?"),
)

SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language(code="bn-IN", name="বাংলা", label="Bengali"),
    Language(code="hi-IN", name="हिंदी", label="Hindi"),
    Language(code="ml-IN", name="മലയാളം", label="Malayalam"),
    Language(code="en-IN", name="English", label="English"),
)


def questions_for(role: Role) -> list[Question]:
    """Return a fresh, untranslated question set for a role."""
    source = EMPLOYER_QUESTIONS if role == Role.employer else JOB_SEEKER_QUESTIONS
    return [Question(key=key, label=label) for key, label in source]


def get_language(language_code: str) -> Language:
    """Look up a supported UI language by its locale code.

    Raises:
        UnsupportedLanguageError: If the code is not in the catalogue.
    """
    for language in SUPPORTED_LANGUAGES:
        if language.code.lower() == language_code.strip().lower():
            return language
    raise UnsupportedLanguageError(language_code)
