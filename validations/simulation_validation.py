"""
Simulation (timed test) schemas, assignment rules and scoring presets.

Cross-field invariants are plain predicates (validate_date_range,
validate_passing_score, validate_question_distribution) so they can be reused
outside the pydantic models; CreateSimulation applies them at model level.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, NonNegativeInt, TypeAdapter, model_validator

from validations.schema import (
    IsoDateTime,
    max_length,
    min_length,
    number_range,
    parse_iso_datetime,
    partial_model,
)

logger = logging.getLogger(__name__)


class SimulationType(str, Enum):
    OFFICIAL = "OFFICIAL"
    PRACTICE = "PRACTICE"
    CUSTOM = "CUSTOM"
    QUICK_QUIZ = "QUICK_QUIZ"


class SimulationStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class SimulationVisibility(str, Enum):
    PRIVATE = "PRIVATE"
    GROUP = "GROUP"
    PUBLIC = "PUBLIC"


class CreatorRole(str, Enum):
    ADMIN = "ADMIN"
    COLLABORATOR = "COLLABORATOR"
    STUDENT = "STUDENT"


class LocationType(str, Enum):
    ONLINE = "ONLINE"
    IN_PERSON = "IN_PERSON"
    HYBRID = "HYBRID"


class SmartRandomPreset(str, Enum):
    PROPORTIONAL = "PROPORTIONAL"  # proportional to available questions per subject
    BALANCED = "BALANCED"  # equal share per subject
    SINGLE_SUBJECT = "SINGLE_SUBJECT"
    CUSTOM = "CUSTOM"


class DifficultyMix(str, Enum):
    BALANCED = "BALANCED"
    EASY_FOCUS = "EASY_FOCUS"
    HARD_FOCUS = "HARD_FOCUS"
    MEDIUM_ONLY = "MEDIUM_ONLY"
    MIXED = "MIXED"


QuestionCount = Annotated[int, Field(strict=True, ge=0)]

# subject id -> number of questions
SubjectDistribution = Dict[str, QuestionCount]
SUBJECT_DISTRIBUTION_ADAPTER = TypeAdapter(SubjectDistribution)

MISSING_TARGET_MESSAGE = "Devi selezionare almeno uno tra studente o gruppo"
MISSING_SIMULATION_ID = "ID simulazione obbligatorio"
DATE_RANGE_MESSAGE = "La data di fine deve essere successiva alla data di inizio"
PASSING_SCORE_MESSAGE = "Il punteggio minimo non può superare il punteggio massimo"
DISTRIBUTION_MESSAGE = "La distribuzione per materia deve corrispondere al numero totale di domande"

SimulationId = Annotated[str, min_length(1, MISSING_SIMULATION_ID)]


class DifficultyDistribution(BaseModel):
    EASY: NonNegativeInt = 0
    MEDIUM: NonNegativeInt = 0
    HARD: NonNegativeInt = 0


class SimulationSection(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, min_length(1, "Nome sezione obbligatorio")]
    duration_minutes: Annotated[int, number_range("Durata sezione obbligatoria", ge=1)]
    question_count: Optional[Annotated[int, Field(ge=1)]] = None
    subject_id: Optional[str] = None
    question_ids: List[str] = []
    order: NonNegativeInt = 0


class SimulationQuestion(BaseModel):
    question_id: Annotated[str, min_length(1, "ID domanda obbligatorio")]
    order: NonNegativeInt
    custom_points: Optional[float] = None
    custom_negative_points: Optional[float] = None


class AssignmentTarget(BaseModel):
    """A student or a group receiving a simulation. At least one of the two is required."""
    student_id: Optional[str] = None
    group_id: Optional[str] = None
    due_date: Optional[IsoDateTime] = None
    notes: Optional[str] = None
    start_date: Optional[IsoDateTime] = None
    end_date: Optional[IsoDateTime] = None
    location_type: Optional[LocationType] = None
    create_calendar_event: bool = False

    @model_validator(mode="after")
    def _require_target(self) -> "AssignmentTarget":
        if not (self.student_id or self.group_id):
            raise ValueError(MISSING_TARGET_MESSAGE)
        return self


class BulkAssignment(BaseModel):
    simulation_id: SimulationId
    targets: Annotated[List[AssignmentTarget], min_length(1, "Seleziona almeno un destinatario")]


class SimulationBase(BaseModel):
    title: Annotated[
        str,
        min_length(1, "Il titolo è obbligatorio"),
        max_length(200, "Titolo troppo lungo"),
    ]
    description: Optional[str] = None
    type: SimulationType
    visibility: SimulationVisibility = SimulationVisibility.PRIVATE
    is_official: bool = False
    access_type: Optional[Literal["OPEN", "ROOM"]] = None
    start_date: Optional[IsoDateTime] = None
    end_date: Optional[IsoDateTime] = None
    duration_minutes: Annotated[int, number_range("La durata deve essere positiva", ge=0)] = 0
    total_questions: Annotated[int, number_range("Minimo 1 domanda", ge=1)]

    show_results: bool = True
    show_correct_answers: bool = True
    allow_review: bool = True
    randomize_order: bool = False
    randomize_answers: bool = False

    # Scoring
    use_question_points: bool = False
    correct_points: float = 1.5
    wrong_points: Annotated[
        float,
        number_range("I punti per risposta errata devono essere negativi o zero", le=0),
    ] = -0.4
    blank_points: float = 0
    max_score: Optional[float] = None
    passing_score: Optional[float] = None

    is_repeatable: bool = False
    max_attempts: Optional[Annotated[int, Field(ge=1)]] = None

    # Paper-based sessions
    is_paper_based: bool = False
    paper_instructions: Optional[str] = None
    show_sections_in_paper: bool = True
    track_attendance: bool = False
    location_type: Optional[LocationType] = None
    location_details: Optional[str] = None

    has_sections: bool = False
    sections: Optional[List[SimulationSection]] = None
    is_scheduled: bool = False

    # Anti-cheat
    enable_anti_cheat: bool = False
    force_fullscreen: bool = False
    block_tab_change: bool = False
    block_copy_paste: bool = False
    log_suspicious_events: bool = False

    subject_distribution: Optional[SubjectDistribution] = None
    difficulty_distribution: Optional[DifficultyDistribution] = None
    topic_ids: Optional[List[str]] = None
    is_public: bool = False

    @model_validator(mode="after")
    def _check_ranges(self) -> "SimulationBase":
        if not validate_date_range(self.start_date, self.end_date):
            raise ValueError(DATE_RANGE_MESSAGE)
        if not validate_passing_score(self.passing_score, self.max_score):
            raise ValueError(PASSING_SCORE_MESSAGE)
        if not validate_question_distribution(self.total_questions, self.subject_distribution):
            raise ValueError(DISTRIBUTION_MESSAGE)
        return self


class ManualSimulation(SimulationBase):
    """Simulation built from an explicit list of questions."""
    selection_mode: Literal["manual"]
    questions: Annotated[List[SimulationQuestion], min_length(1, "Aggiungi almeno una domanda")]
    assignments: List[AssignmentTarget] = []


class AutomaticSimulation(SimulationBase):
    """Simulation whose questions are drawn per subject according to subject_distribution."""
    selection_mode: Literal["automatic"]
    subject_distribution: SubjectDistribution
    assignments: List[AssignmentTarget] = []


CreateSimulation = TypeAdapter(
    Annotated[Union[ManualSimulation, AutomaticSimulation], Field(discriminator="selection_mode")]
)

UpdateSimulation = partial_model(
    SimulationBase,
    "UpdateSimulation",
    id=(SimulationId, ...),
    status=(Optional[SimulationStatus], None),
)


class UpdateSimulationQuestions(BaseModel):
    simulation_id: SimulationId
    questions: Annotated[List[SimulationQuestion], min_length(1, "Aggiungi almeno una domanda")]
    mode: Literal["replace", "append", "remove"] = "replace"


class SimulationFilter(BaseModel):
    page: Annotated[int, Field(ge=1)] = 1
    page_size: Annotated[int, Field(ge=1, le=100)] = 20
    search: Optional[str] = None
    type: Optional[SimulationType] = None
    status: Optional[SimulationStatus] = None
    visibility: Optional[SimulationVisibility] = None
    is_official: Optional[bool] = None
    group_id: Optional[str] = None
    created_by_id: Optional[str] = None
    creator_role: Optional[CreatorRole] = None
    start_date_from: Optional[IsoDateTime] = None
    start_date_to: Optional[IsoDateTime] = None
    end_date_from: Optional[IsoDateTime] = None
    end_date_to: Optional[IsoDateTime] = None
    sort_by: Literal["createdAt", "title", "startDate", "endDate", "totalQuestions"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class StudentSimulationFilter(BaseModel):
    page: Annotated[int, Field(ge=1)] = 1
    page_size: Annotated[int, Field(ge=1, le=100)] = 20
    type: Optional[SimulationType] = None
    status: Optional[Literal["available", "in_progress", "completed", "expired"]] = None
    is_official: Optional[bool] = None
    self_created: Optional[bool] = None
    assigned_to_me: Optional[bool] = None
    sort_by: Literal["startDate", "endDate", "dueDate", "title"] = "startDate"
    sort_order: Literal["asc", "desc"] = "desc"


class SimulationAnswer(BaseModel):
    question_id: Annotated[str, Field(min_length=1)]
    answer_id: Optional[str] = None  # choice questions
    answer_text: Optional[str] = None  # open questions
    time_spent: Optional[NonNegativeInt] = None  # seconds
    flagged: bool = False


class SubmitSimulation(BaseModel):
    simulation_id: SimulationId
    answers: List[SimulationAnswer]
    total_time_spent: NonNegativeInt
    is_partial: bool = False


class QuickQuizConfig(BaseModel):
    """Student self-practice quiz. duration_minutes=0 means no time limit."""
    subject_ids: Annotated[List[str], min_length(1, "Seleziona almeno una materia")]
    topic_ids: Optional[List[str]] = None
    difficulty: Literal["EASY", "MEDIUM", "HARD", "MIXED"] = "MIXED"
    question_count: Annotated[int, Field(ge=5, le=100)] = 10
    duration_minutes: NonNegativeInt = 0
    correct_points: float = 1.0
    wrong_points: Annotated[float, Field(le=0)] = 0
    show_results_immediately: bool = True
    show_correct_answers: bool = True


class PaperAnswer(BaseModel):
    question_id: Annotated[str, Field(min_length=1)]
    answer_id: Optional[str] = None  # None = left blank


class CreatePaperResult(BaseModel):
    simulation_id: SimulationId
    student_id: Annotated[str, min_length(1, "ID studente obbligatorio")]
    answers: List[PaperAnswer]
    was_present: bool = True


class PaperResultEntry(BaseModel):
    student_id: Annotated[str, Field(min_length=1)]
    answers: List[PaperAnswer]
    was_present: bool = True


class BulkPaperResults(BaseModel):
    simulation_id: SimulationId
    results: List[PaperResultEntry]


class SmartRandomGeneration(BaseModel):
    total_questions: Annotated[int, Field(ge=5)]
    preset: SmartRandomPreset = SmartRandomPreset.BALANCED
    focus_subject_id: Optional[str] = None
    custom_subject_distribution: Optional[SubjectDistribution] = None
    difficulty_mix: DifficultyMix = DifficultyMix.BALANCED
    avoid_recently_used: bool = True
    maximize_topic_coverage: bool = True
    prefer_recent_questions: bool = False
    tag_ids: Optional[List[str]] = None
    exclude_question_ids: Optional[List[str]] = None


def _to_datetime(value: Union[str, datetime]) -> Optional[datetime]:
    """Aware datetime for value, or None when a string cannot be read as ISO 8601."""
    if isinstance(value, str):
        value = parse_iso_datetime(value)
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def validate_date_range(
    start: Optional[Union[str, datetime]],
    end: Optional[Union[str, datetime]],
) -> bool:
    """
    True when either bound is missing, or end is strictly after start.
    An unreadable bound never forms a valid range.
    """
    if not start or not end:
        return True
    start_at, end_at = _to_datetime(start), _to_datetime(end)
    if start_at is None or end_at is None:
        logger.debug(f"Unreadable date range bound: {start!r} -> {end!r}")
        return False
    return end_at > start_at


def validate_passing_score(passing_score: Optional[float], max_score: Optional[float]) -> bool:
    """True when either score is missing, or passing_score <= max_score. 0 is a real score."""
    if passing_score is None or max_score is None:
        return True
    return passing_score <= max_score


def get_total_from_distribution(distribution: Mapping[str, int]) -> int:
    return sum(distribution.values())


def validate_question_distribution(
    total_questions: int,
    distribution: Optional[Mapping[str, int]],
) -> bool:
    """The per-subject counts must add up exactly to total_questions. No distribution is valid."""
    if distribution is None:
        return True
    return get_total_from_distribution(distribution) == total_questions


def is_official_simulation(simulation: Union[BaseModel, Mapping[str, Any]]) -> bool:
    if isinstance(simulation, Mapping):
        sim_type, is_official = simulation.get("type"), simulation.get("is_official", False)
    else:
        sim_type, is_official = simulation.type, simulation.is_official
    return sim_type == SimulationType.OFFICIAL and bool(is_official)


def is_student_creatable(sim_type: Union[SimulationType, str]) -> bool:
    return sim_type in (SimulationType.CUSTOM, SimulationType.QUICK_QUIZ)


def requires_scheduling(sim_type: Union[SimulationType, str]) -> bool:
    return sim_type in (SimulationType.OFFICIAL, SimulationType.PRACTICE)


_DIFFICULTY_RATIOS = {
    DifficultyMix.BALANCED: (0.30, 0.50, 0.20),
    DifficultyMix.EASY_FOCUS: (0.50, 0.40, 0.10),
    DifficultyMix.HARD_FOCUS: (0.10, 0.40, 0.50),
    DifficultyMix.MEDIUM_ONLY: (0, 1.0, 0),
    DifficultyMix.MIXED: (0.33, 0.34, 0.33),
}


def get_difficulty_ratios(mix: Union[DifficultyMix, str, None]) -> Dict[str, float]:
    """Share of EASY/MEDIUM/HARD questions for a mix. Unknown mixes fall back to BALANCED."""
    try:
        ratios = _DIFFICULTY_RATIOS[DifficultyMix(mix)]
    except ValueError:
        logger.debug(f"Unknown difficulty mix {mix!r}, using BALANCED")
        ratios = _DIFFICULTY_RATIOS[DifficultyMix.BALANCED]
    easy, medium, hard = ratios
    return {"EASY": easy, "MEDIUM": medium, "HARD": hard}


def _preset(**values: Any) -> Mapping[str, Any]:
    return MappingProxyType(values)


_NO_ANTI_CHEAT = dict(
    enable_anti_cheat=False,
    force_fullscreen=False,
    block_tab_change=False,
    block_copy_paste=False,
    log_suspicious_events=False,
)

SIMULATION_PRESETS: Mapping[str, Mapping[str, Any]] = MappingProxyType({
    "OFFICIAL_TOLC_MED": _preset(
        type=SimulationType.OFFICIAL,
        is_official=True,
        duration_minutes=110,
        total_questions=60,
        correct_points=1.5,
        wrong_points=-0.4,
        blank_points=0,
        randomize_order=False,
        randomize_answers=False,
        # results are released only after the deadline
        show_results=False,
        show_correct_answers=False,
        allow_review=False,
        is_repeatable=False,
        enable_anti_cheat=True,
        force_fullscreen=True,
        block_tab_change=True,
        block_copy_paste=True,
        log_suspicious_events=True,
        has_sections=True,
    ),
    "PRACTICE_TEST": _preset(
        type=SimulationType.PRACTICE,
        is_official=False,
        duration_minutes=60,
        total_questions=30,
        correct_points=1.0,
        wrong_points=0,
        blank_points=0,
        randomize_order=True,
        randomize_answers=True,
        show_results=True,
        show_correct_answers=True,
        allow_review=True,
        is_repeatable=True,
        max_attempts=3,
        has_sections=False,
        **_NO_ANTI_CHEAT,
    ),
    "QUICK_QUIZ": _preset(
        type=SimulationType.QUICK_QUIZ,
        is_official=False,
        duration_minutes=15,
        total_questions=10,
        correct_points=1.0,
        wrong_points=0,
        blank_points=0,
        randomize_order=True,
        randomize_answers=True,
        show_results=True,
        show_correct_answers=True,
        allow_review=True,
        is_repeatable=True,
        has_sections=False,
        **_NO_ANTI_CHEAT,
    ),
    "PAPER_BASED": _preset(
        type=SimulationType.CUSTOM,
        is_official=False,
        duration_minutes=90,
        total_questions=50,
        correct_points=1.5,
        wrong_points=-0.4,
        blank_points=0,
        randomize_order=False,
        randomize_answers=False,
        show_results=True,
        show_correct_answers=True,
        allow_review=True,
        is_repeatable=False,
        is_paper_based=True,
        has_sections=False,
        **_NO_ANTI_CHEAT,
    ),
})
