"""
Question bank schemas and cross-field rules for answers and keywords.

Structural checks (presence, enum membership, ranges, URLs) live in the pydantic
models. Rules that depend on the question type are plain functions so they can
run on already-parsed models as well as on raw dicts.
"""

import string
from enum import Enum
from typing import Annotated, Any, List, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, NonNegativeFloat, NonNegativeInt, NonPositiveFloat

from validations.schema import Url, ValidationResult, min_length, partial_model


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    SINGLE_CHOICE = "SINGLE_CHOICE"
    OPEN_TEXT = "OPEN_TEXT"


class QuestionStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class DifficultyLevel(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class OpenAnswerValidationType(str, Enum):
    """How open-text answers are graded."""
    MANUAL = "MANUAL"
    KEYWORDS = "KEYWORDS"
    BOTH = "BOTH"  # automatic keyword score, confirmed manually


class QuestionFeedbackType(str, Enum):
    ERROR_IN_QUESTION = "ERROR_IN_QUESTION"
    ERROR_IN_ANSWER = "ERROR_IN_ANSWER"
    UNCLEAR = "UNCLEAR"
    SUGGESTION = "SUGGESTION"
    OTHER = "OTHER"


class QuestionFeedbackStatus(str, Enum):
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    FIXED = "FIXED"
    REJECTED = "REJECTED"


Year = Annotated[int, Field(ge=1900, le=2100)]


class QuestionAnswer(BaseModel):
    """One choice answer. label and order follow the answer's position (A/0, B/1, ...)."""
    id: Optional[str] = None
    text: Annotated[str, min_length(1, "Il testo della risposta è obbligatorio")]
    text_latex: Optional[str] = None
    image_url: Optional[Url] = None
    image_alt: Optional[str] = None
    is_correct: bool = False
    explanation: Optional[str] = None
    order: NonNegativeInt = 0
    label: Optional[str] = None


class QuestionKeyword(BaseModel):
    """Scoring keyword for automatic grading of open-text answers."""
    id: Optional[str] = None
    keyword: Annotated[str, min_length(1, "La keyword è obbligatoria")]
    weight: Annotated[float, Field(ge=0, le=10)] = 1.0
    is_required: bool = False
    is_suggested: bool = False
    case_sensitive: bool = False
    exact_match: bool = False
    synonyms: List[str] = []


class QuestionBase(BaseModel):
    type: QuestionType = QuestionType.SINGLE_CHOICE
    status: QuestionStatus = QuestionStatus.DRAFT
    text: Annotated[str, min_length(1, "Il testo della domanda è obbligatorio")]
    text_latex: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[Url] = None
    image_alt: Optional[str] = None

    subject_id: Optional[str] = None
    topic_id: Optional[str] = None
    sub_topic_id: Optional[str] = None
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM

    # Scoring
    points: NonNegativeFloat = 1.0
    negative_points: NonPositiveFloat = 0
    blank_points: float = 0
    time_limit_seconds: Optional[NonNegativeInt] = None

    correct_explanation: Optional[str] = None
    wrong_explanation: Optional[str] = None
    general_explanation: Optional[str] = None
    explanation_video_url: Optional[Url] = None
    explanation_pdf_url: Optional[Url] = None

    # Open-text grading
    open_validation_type: Optional[OpenAnswerValidationType] = None
    open_min_length: Optional[NonNegativeInt] = None
    open_max_length: Optional[NonNegativeInt] = None
    open_case_sensitive: bool = False
    open_partial_match: bool = True

    shuffle_answers: bool = False
    show_explanation: bool = True
    tags: List[str] = []
    year: Optional[Year] = None
    source: Optional[str] = None
    external_id: Optional[str] = None


class CreateQuestion(QuestionBase):
    answers: List[QuestionAnswer] = []
    keywords: List[QuestionKeyword] = []


# Every base field optional and left unset when omitted, so partial updates
# never overwrite stored values with defaults.
UpdateQuestion = partial_model(
    QuestionBase,
    "UpdateQuestion",
    id=(str, ...),
    answers=(Optional[List[QuestionAnswer]], None),
    keywords=(Optional[List[QuestionKeyword]], None),
    change_reason=(Optional[str], None),
)


class QuestionFilter(BaseModel):
    page: Annotated[int, Field(ge=1)] = 1
    page_size: Annotated[int, Field(ge=1, le=100)] = 20
    search: Optional[str] = None
    subject_id: Optional[str] = None
    topic_id: Optional[str] = None
    sub_topic_id: Optional[str] = None
    type: Optional[QuestionType] = None
    status: Optional[QuestionStatus] = None
    difficulty: Optional[DifficultyLevel] = None
    tags: Optional[List[str]] = None  # legacy free-text tags
    tag_ids: Optional[List[str]] = None
    year: Optional[int] = None
    source: Optional[str] = None
    created_by_id: Optional[str] = None
    sort_by: Literal[
        "createdAt", "updatedAt", "text", "difficulty", "timesUsed", "avgCorrectRate"
    ] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"
    include_answers: bool = False
    include_drafts: bool = True
    include_archived: bool = False


class CreateQuestionFeedback(BaseModel):
    question_id: str
    type: QuestionFeedbackType
    message: Annotated[str, min_length(10, "Descrivi il problema in almeno 10 caratteri")]


class UpdateQuestionFeedback(BaseModel):
    id: str
    status: QuestionFeedbackStatus
    admin_response: Optional[str] = None


class ImportQuestionRow(BaseModel):
    """One spreadsheet row. Answers are columns A-E; lists are comma-separated strings."""
    text: Annotated[str, Field(min_length=1)]
    type: QuestionType = QuestionType.SINGLE_CHOICE
    subject_code: Optional[str] = None
    topic_name: Optional[str] = None
    difficulty: Optional[DifficultyLevel] = None
    answer_a: Optional[str] = None
    answer_b: Optional[str] = None
    answer_c: Optional[str] = None
    answer_d: Optional[str] = None
    answer_e: Optional[str] = None
    correct_answers: Optional[str] = None  # "A" or "A,B,C"
    correct_explanation: Optional[str] = None
    wrong_explanation: Optional[str] = None
    points: Optional[float] = None
    negative_points: Optional[float] = None
    tags: Optional[str] = None
    year: Optional[int] = None
    source: Optional[str] = None
    external_id: Optional[str] = None
    keywords: Optional[str] = None


def _get(item: Union[BaseModel, Mapping], key: str, default: Any = None) -> Any:
    if isinstance(item, BaseModel):
        return getattr(item, key, default)
    return item.get(key, default)


def validate_question_answers(
    question_type: Union[QuestionType, str],
    answers: Sequence[Union[QuestionAnswer, Mapping]],
) -> ValidationResult:
    """
    Choice questions need at least 2 answers and at least one correct answer;
    single choice needs exactly one. Open-text questions ignore answers.
    """
    if question_type == QuestionType.OPEN_TEXT:
        return ValidationResult.ok()

    if len(answers) < 2:
        return ValidationResult.fail("Una domanda a risposta multipla deve avere almeno 2 risposte.")

    correct = sum(1 for a in answers if _get(a, "is_correct", False))
    if correct == 0:
        return ValidationResult.fail("Devi indicare almeno una risposta corretta.")
    if question_type == QuestionType.SINGLE_CHOICE and correct > 1:
        return ValidationResult.fail("Una domanda a risposta singola può avere solo una risposta corretta.")

    return ValidationResult.ok()


def validate_question_keywords(
    question_type: Union[QuestionType, str],
    validation_type: Optional[Union[OpenAnswerValidationType, str]],
    keywords: Sequence[Union[QuestionKeyword, Mapping]],
) -> ValidationResult:
    """Automatic grading (KEYWORDS or BOTH) of an open-text question needs a required keyword."""
    if question_type != QuestionType.OPEN_TEXT:
        return ValidationResult.ok()
    if validation_type not in (OpenAnswerValidationType.KEYWORDS, OpenAnswerValidationType.BOTH):
        return ValidationResult.ok()

    if not keywords:
        return ValidationResult.fail("Devi inserire almeno una keyword per la validazione automatica.")
    if not any(_get(k, "is_required", False) for k in keywords):
        return ValidationResult.fail("Devi avere almeno una keyword obbligatoria.")

    return ValidationResult.ok()


def assign_answer_labels(answers: Sequence[QuestionAnswer]) -> List[QuestionAnswer]:
    """Return copies labelled A, B, C... with order matching their position."""
    return [
        answer.model_copy(update={"label": string.ascii_uppercase[i], "order": i})
        for i, answer in enumerate(answers)
    ]


QUESTION_TYPE_LABELS = {
    QuestionType.MULTIPLE_CHOICE: "Risposta Multipla",
    QuestionType.SINGLE_CHOICE: "Risposta Singola",
    QuestionType.OPEN_TEXT: "Risposta Aperta",
}

QUESTION_STATUS_LABELS = {
    QuestionStatus.DRAFT: "Bozza",
    QuestionStatus.PUBLISHED: "Pubblicata",
    QuestionStatus.ARCHIVED: "Archiviata",
}

DIFFICULTY_LABELS = {
    DifficultyLevel.EASY: "Facile",
    DifficultyLevel.MEDIUM: "Media",
    DifficultyLevel.HARD: "Difficile",
}

OPEN_VALIDATION_TYPE_LABELS = {
    OpenAnswerValidationType.MANUAL: "Valutazione Manuale",
    OpenAnswerValidationType.KEYWORDS: "Valutazione Automatica (Keywords)",
    OpenAnswerValidationType.BOTH: "Automatica + Conferma Manuale",
}

FEEDBACK_TYPE_LABELS = {
    QuestionFeedbackType.ERROR_IN_QUESTION: "Errore nella domanda",
    QuestionFeedbackType.ERROR_IN_ANSWER: "Errore nelle risposte",
    QuestionFeedbackType.UNCLEAR: "Domanda poco chiara",
    QuestionFeedbackType.SUGGESTION: "Suggerimento",
    QuestionFeedbackType.OTHER: "Altro",
}

FEEDBACK_STATUS_LABELS = {
    QuestionFeedbackStatus.PENDING: "In attesa",
    QuestionFeedbackStatus.REVIEWED: "Revisionata",
    QuestionFeedbackStatus.FIXED: "Corretta",
    QuestionFeedbackStatus.REJECTED: "Rifiutata",
}
