"""
Daily exercise-safety decision engine.

Pure functions: no database access, no logging, no clock. Given the questions
of a quiz and the parsed answers, produce one of three graded recommendations.

Classification is a short-circuit waterfall over categorical rules:

    RECOVER  any red flag (intense fatigue, strong pain, exhaustion, the
             patient does not feel safe, very shaken, specific discomfort)
    ADAPT    no red flag, but any yellow flag (moderate fatigue or pain,
             demanding treatment day, poor sleep, anxious or sad, only
             somewhat safe, any symptom other than "none")
    TRAIN    neither of the above

A single red flag always wins; the score is a fixed display value per tier,
never a sum, so one dangerous answer cannot be averaged away.

Questions are addressed by their semantic role, never by order or id.
Tokens the engine does not know are treated as "no match" and reported in
DailyDecision.unrecognized so the caller can flag catalog/engine drift.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from checkin.core.answer_values import AnswerValue, Choice, YesNo
from checkin.models.models import Classification, QuestionRole, QuizPurpose

# =============================================================================
# Option tokens
# =============================================================================

ENERGY_HIGH = "ENERGY_HIGH"
ENERGY_GOOD = "ENERGY_GOOD"
ENERGY_LOW = "ENERGY_LOW"
ENERGY_EXHAUSTED = "ENERGY_EXHAUSTED"

FATIGUE_NONE = "FATIGUE_NONE"
FATIGUE_MILD = "FATIGUE_MILD"
FATIGUE_MODERATE = "FATIGUE_MODERATE"
FATIGUE_INTENSE = "FATIGUE_INTENSE"

PAIN_NONE = "PAIN_NONE"
PAIN_MILD = "PAIN_MILD"
PAIN_MODERATE = "PAIN_MODERATE"
PAIN_STRONG = "PAIN_STRONG"

SYM_NENHUM = "SYM_NENHUM"
SYM_NAUSEA = "SYM_NAUSEA"
SYM_TONTURA = "SYM_TONTURA"
SYM_FALTA_AR = "SYM_FALTA_AR"
SYM_FEBRE = "SYM_FEBRE"
SYM_MULTIPLOS = "SYM_MULTIPLOS"

TREATMENT_NENHUM = "TREATMENT_NENHUM"
TREATMENT_QUIMIO = "TREATMENT_QUIMIO"
TREATMENT_RADIO = "TREATMENT_RADIO"
TREATMENT_HORMONIO = "TREATMENT_HORMONIO"
TREATMENT_POS_CIRURGICO = "TREATMENT_POS_CIRURGICO"

SLEEP_BOM = "SLEEP_BOM"
SLEEP_MEH = "SLEEP_MEH"
SLEEP_NAO = "SLEEP_NAO"

EMO_BEM = "EMO_BEM"
EMO_ANSI = "EMO_ANSI"
EMO_TRISTE = "EMO_TRISTE"
EMO_MUITO_ABALADA = "EMO_MUITO_ABALADA"

SAFETY_SIM = "SAFETY_SIM"
SAFETY_POUCO = "SAFETY_POUCO"
SAFETY_NAO = "SAFETY_NAO"
SAFETY_DUVIDA = "SAFETY_DUVIDA"

DISCONFORTO_SIM = "DISCONFORTO_SIM"
DISCONFORTO_NAO = "DISCONFORTO_NAO"

CONSULT_YES = "CONSULT_YES"
CONSULT_NO = "CONSULT_NO"

SYMPTOM_TOKENS: FrozenSet[str] = frozenset(
    {SYM_NAUSEA, SYM_TONTURA, SYM_FALTA_AR, SYM_FEBRE, SYM_MULTIPLOS}
)

RECOGNIZED_TOKENS: Dict[QuestionRole, FrozenSet[str]] = {
    QuestionRole.ENERGY: frozenset(
        {ENERGY_HIGH, ENERGY_GOOD, ENERGY_LOW, ENERGY_EXHAUSTED}
    ),
    QuestionRole.FATIGUE: frozenset(
        {FATIGUE_NONE, FATIGUE_MILD, FATIGUE_MODERATE, FATIGUE_INTENSE}
    ),
    QuestionRole.PAIN: frozenset({PAIN_NONE, PAIN_MILD, PAIN_MODERATE, PAIN_STRONG}),
    QuestionRole.SYMPTOMS: SYMPTOM_TOKENS | {SYM_NENHUM},
    QuestionRole.TREATMENT_DAY: frozenset(
        {
            TREATMENT_NENHUM,
            TREATMENT_QUIMIO,
            TREATMENT_RADIO,
            TREATMENT_HORMONIO,
            TREATMENT_POS_CIRURGICO,
        }
    ),
    QuestionRole.SLEEP: frozenset({SLEEP_BOM, SLEEP_MEH, SLEEP_NAO}),
    QuestionRole.EMOTIONAL_STATE: frozenset(
        {EMO_BEM, EMO_ANSI, EMO_TRISTE, EMO_MUITO_ABALADA}
    ),
    QuestionRole.SAFETY: frozenset({SAFETY_SIM, SAFETY_POUCO, SAFETY_NAO, SAFETY_DUVIDA}),
    QuestionRole.DISCOMFORT: frozenset({DISCONFORTO_SIM, DISCONFORTO_NAO}),
    QuestionRole.CONSULTATION_INTEREST: frozenset({CONSULT_YES, CONSULT_NO}),
}

# Roles that may also be asked as a plain YES_NO question
YES_NO_ROLES: FrozenSet[QuestionRole] = frozenset(
    {QuestionRole.DISCOMFORT, QuestionRole.CONSULTATION_INTEREST}
)

# Most benign answer per role; a check-in answered entirely with these is TRAIN
BENIGN_TOKENS: Dict[QuestionRole, str] = {
    QuestionRole.ENERGY: ENERGY_HIGH,
    QuestionRole.FATIGUE: FATIGUE_NONE,
    QuestionRole.PAIN: PAIN_NONE,
    QuestionRole.SYMPTOMS: SYM_NENHUM,
    QuestionRole.TREATMENT_DAY: TREATMENT_NENHUM,
    QuestionRole.SLEEP: SLEEP_BOM,
    QuestionRole.EMOTIONAL_STATE: EMO_BEM,
    QuestionRole.SAFETY: SAFETY_SIM,
    QuestionRole.DISCOMFORT: DISCONFORTO_NAO,
    QuestionRole.CONSULTATION_INTEREST: CONSULT_NO,
}


# =============================================================================
# Rules
# =============================================================================


@dataclass(frozen=True)
class Rule:
    """A named condition on one role's answer.

    Matches when the answer is a Choice whose token is in `tokens`, or, when
    `matches_yes` is set, a YesNo answer of True.
    """

    name: str
    role: QuestionRole
    tokens: FrozenSet[str]
    matches_yes: bool = False

    def matches(self, answer: Optional[AnswerValue]) -> bool:
        if isinstance(answer, Choice):
            return answer.token in self.tokens
        if isinstance(answer, YesNo):
            return self.matches_yes and answer.value
        return False


RECOVER_RULES: Tuple[Rule, ...] = (
    Rule("fatigue_intense", QuestionRole.FATIGUE, frozenset({FATIGUE_INTENSE})),
    Rule("pain_strong", QuestionRole.PAIN, frozenset({PAIN_STRONG})),
    Rule("energy_exhausted", QuestionRole.ENERGY, frozenset({ENERGY_EXHAUSTED})),
    Rule(
        "safety_not_confident",
        QuestionRole.SAFETY,
        frozenset({SAFETY_NAO, SAFETY_DUVIDA}),
    ),
    Rule(
        "emotional_very_shaken",
        QuestionRole.EMOTIONAL_STATE,
        frozenset({EMO_MUITO_ABALADA}),
    ),
    Rule(
        "specific_discomfort",
        QuestionRole.DISCOMFORT,
        frozenset({DISCONFORTO_SIM}),
        matches_yes=True,
    ),
)

ADAPT_RULES: Tuple[Rule, ...] = (
    Rule("fatigue_moderate", QuestionRole.FATIGUE, frozenset({FATIGUE_MODERATE})),
    Rule("pain_moderate", QuestionRole.PAIN, frozenset({PAIN_MODERATE})),
    Rule(
        "demanding_treatment_day",
        QuestionRole.TREATMENT_DAY,
        frozenset(
            {
                TREATMENT_QUIMIO,
                TREATMENT_RADIO,
                TREATMENT_HORMONIO,
                TREATMENT_POS_CIRURGICO,
            }
        ),
    ),
    Rule("sleep_poor", QuestionRole.SLEEP, frozenset({SLEEP_MEH, SLEEP_NAO})),
    Rule(
        "emotional_anxious_or_sad",
        QuestionRole.EMOTIONAL_STATE,
        frozenset({EMO_ANSI, EMO_TRISTE}),
    ),
    Rule("safety_somewhat", QuestionRole.SAFETY, frozenset({SAFETY_POUCO})),
    # Only known symptom tokens count; an unknown token never matches
    Rule("symptoms_present", QuestionRole.SYMPTOMS, SYMPTOM_TOKENS),
)

CONSULTATION_RULE = Rule(
    "consultation_requested",
    QuestionRole.CONSULTATION_INTEREST,
    frozenset({CONSULT_YES}),
    matches_yes=True,
)

WATERFALL: Tuple[Tuple[Classification, Tuple[Rule, ...]], ...] = (
    (Classification.RECOVER, RECOVER_RULES),
    (Classification.ADAPT, ADAPT_RULES),
)


# =============================================================================
# Outcomes
# =============================================================================


@dataclass(frozen=True)
class TierOutcome:
    """What the patient is shown for a classification tier."""

    total_score: int
    recommended_exercise_type: str
    exercise_description: Optional[str] = None


# Safety flag per tier. Never configurable per quiz.
GOOD_DAY_FOR_EXERCISE: Dict[Classification, bool] = {
    Classification.RECOVER: False,
    Classification.ADAPT: True,
    Classification.TRAIN: True,
}

DEFAULT_OUTCOMES: Dict[Classification, TierOutcome] = {
    Classification.RECOVER: TierOutcome(
        total_score=20,
        recommended_exercise_type="Recuperação e descanso ativo",
        exercise_description=(
            "Hoje o corpo pede descanso. Priorize respiração, alongamentos "
            "suaves e hidratação."
        ),
    ),
    Classification.ADAPT: TierOutcome(
        total_score=50,
        recommended_exercise_type="Exercício adaptado (cadeira, mobilidade, respiração)",
        exercise_description=(
            "Movimente-se com cuidado: exercícios na cadeira, mobilidade e "
            "respiração, sem carga."
        ),
    ),
    Classification.TRAIN: TierOutcome(
        total_score=80,
        recommended_exercise_type="Treinar hoje (força leve + cardio leve + mobilidade)",
        exercise_description=(
            "Bom dia para treinar: força leve, cardio leve e mobilidade, "
            "respeitando seus limites."
        ),
    ),
}

ASSESSMENT_OUTCOME = TierOutcome(
    total_score=0,
    recommended_exercise_type="Avaliação inicial concluída",
)


@dataclass
class DailyDecision:
    """Result of evaluating one submission.

    classification and is_good_day_for_exercise are None only for the
    initial assessment, which carries no safety classification.
    """

    classification: Optional[Classification]
    is_good_day_for_exercise: Optional[bool]
    total_score: int
    recommended_exercise_type: str
    exercise_description: Optional[str] = None
    triggers: List[str] = field(default_factory=list)  # Matched rule names
    unrecognized: List[str] = field(default_factory=list)  # "role=TOKEN"
    consultation_requested: bool = False


# =============================================================================
# Evaluation
# =============================================================================


def resolve_role_answers(
    questions: Iterable, answers: Mapping[int, AnswerValue]
) -> Dict[QuestionRole, AnswerValue]:
    """
    Build the role -> answer lookup the engine evaluates.

    Args:
        questions: Objects with `id` and `role` attributes (ORM questions)
        answers: Parsed answers keyed by question id

    Returns:
        Answers of role-tagged questions keyed by role. Untagged questions and
        unanswered questions are left out.
    """
    resolved: Dict[QuestionRole, AnswerValue] = {}
    for question in questions:
        if question.role is None or question.id not in answers:
            continue
        resolved[QuestionRole(question.role)] = answers[question.id]
    return resolved


def find_unrecognized(role_answers: Mapping[QuestionRole, AnswerValue]) -> List[str]:
    """
    List answers the engine has no rule vocabulary for, as "role=value".

    Returns:
        Sorted list; empty when the catalog and the engine agree.
    """
    unrecognized = []
    for role, answer in role_answers.items():
        if isinstance(answer, Choice):
            if answer.token not in RECOGNIZED_TOKENS[role]:
                unrecognized.append(f"{role.value}={answer.token}")
        elif isinstance(answer, YesNo):
            if role not in YES_NO_ROLES:
                unrecognized.append(f"{role.value}={answer.raw}")
        else:
            unrecognized.append(f"{role.value}={answer.raw}")
    return sorted(unrecognized)


def resolve_outcomes(
    overrides: Optional[Mapping[Classification, TierOutcome]] = None,
) -> Dict[Classification, TierOutcome]:
    """Merge per-quiz overrides over the default tier outcomes."""
    outcomes = dict(DEFAULT_OUTCOMES)
    if overrides:
        outcomes.update(overrides)
    return outcomes


def classify(
    role_answers: Mapping[QuestionRole, AnswerValue],
) -> Tuple[Classification, List[str]]:
    """
    Run the waterfall.

    Returns:
        The classification and the names of the rules that matched in the
        winning tier (empty for TRAIN).
    """
    for classification, rules in WATERFALL:
        matched = [rule.name for rule in rules if rule.matches(role_answers.get(rule.role))]
        if matched:
            return classification, matched
    return Classification.TRAIN, []


def evaluate_daily_checkin(
    role_answers: Mapping[QuestionRole, AnswerValue],
    outcomes: Optional[Mapping[Classification, TierOutcome]] = None,
) -> DailyDecision:
    """
    Classify a daily check-in.

    Missing roles simply match nothing. Total: every input yields exactly one
    of RECOVER, ADAPT or TRAIN.

    Args:
        role_answers: Parsed answers keyed by question role
        outcomes: Optional per-quiz overrides of the displayed tier outcome

    Returns:
        The decision
    """
    classification, triggers = classify(role_answers)
    outcome = resolve_outcomes(outcomes)[classification]
    return DailyDecision(
        classification=classification,
        is_good_day_for_exercise=GOOD_DAY_FOR_EXERCISE[classification],
        total_score=outcome.total_score,
        recommended_exercise_type=outcome.recommended_exercise_type,
        exercise_description=outcome.exercise_description,
        triggers=triggers,
        unrecognized=find_unrecognized(role_answers),
        consultation_requested=CONSULTATION_RULE.matches(
            role_answers.get(QuestionRole.CONSULTATION_INTEREST)
        ),
    )


def assessment_decision() -> DailyDecision:
    """Neutral outcome recorded for initial-assessment submissions."""
    return DailyDecision(
        classification=None,
        is_good_day_for_exercise=None,
        total_score=ASSESSMENT_OUTCOME.total_score,
        recommended_exercise_type=ASSESSMENT_OUTCOME.recommended_exercise_type,
    )


def decide(
    purpose: QuizPurpose,
    questions: Iterable,
    answers: Mapping[int, AnswerValue],
    outcomes: Optional[Mapping[Classification, TierOutcome]] = None,
) -> DailyDecision:
    """
    Entry point used by the submission orchestrator.

    Initial assessments bypass the waterfall entirely; daily check-ins are
    resolved by role and classified.

    Args:
        purpose: Purpose slot of the quiz being answered
        questions: The quiz's questions (need `id` and `role`)
        answers: Parsed answers keyed by question id
        outcomes: Optional per-quiz overrides of the displayed tier outcome

    Returns:
        The decision
    """
    if QuizPurpose(purpose) == QuizPurpose.INITIAL_ASSESSMENT:
        return assessment_decision()
    return evaluate_daily_checkin(resolve_role_answers(questions, answers), outcomes)
