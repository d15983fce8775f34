"""
Baseline catalog content.

The default daily check-in tags one question per role with the option tokens
the decision engine recognizes; the default initial assessment is a short
profiling questionnaire. Both are created only when no quiz exists for the
purpose, so running the seeder repeatedly is safe.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from checkin.core import decision_engine as de
from checkin.core.catalog import create_quiz
from checkin.models.models import QuestionRole, QuestionType, Quiz, QuizPurpose

logger = logging.getLogger(__name__)


def _choice(order: int, role: QuestionRole, text: str, options: List[tuple]) -> Dict[str, Any]:
    return {
        "order": order,
        "role": role,
        "text": text,
        "question_type": QuestionType.MULTIPLE_CHOICE,
        "options": [{"token": token, "label": label} for token, label in options],
    }


DAILY_CHECKIN_QUESTIONS: List[Dict[str, Any]] = [
    _choice(
        1,
        QuestionRole.ENERGY,
        "Como está sua energia hoje?",
        [
            (de.ENERGY_HIGH, "Muita energia"),
            (de.ENERGY_GOOD, "Boa"),
            (de.ENERGY_LOW, "Baixa"),
            (de.ENERGY_EXHAUSTED, "Exausta"),
        ],
    ),
    _choice(
        2,
        QuestionRole.FATIGUE,
        "Como está seu cansaço?",
        [
            (de.FATIGUE_NONE, "Sem cansaço"),
            (de.FATIGUE_MILD, "Leve"),
            (de.FATIGUE_MODERATE, "Moderado"),
            (de.FATIGUE_INTENSE, "Intenso"),
        ],
    ),
    _choice(
        3,
        QuestionRole.PAIN,
        "Você está sentindo dor?",
        [
            (de.PAIN_NONE, "Nenhuma dor"),
            (de.PAIN_MILD, "Dor leve"),
            (de.PAIN_MODERATE, "Dor moderada"),
            (de.PAIN_STRONG, "Dor forte"),
        ],
    ),
    _choice(
        4,
        QuestionRole.SYMPTOMS,
        "Algum destes sintomas hoje?",
        [
            (de.SYM_NENHUM, "Nenhum"),
            (de.SYM_NAUSEA, "Náusea"),
            (de.SYM_TONTURA, "Tontura"),
            (de.SYM_FALTA_AR, "Falta de ar"),
            (de.SYM_FEBRE, "Febre"),
            (de.SYM_MULTIPLOS, "Mais de um destes"),
        ],
    ),
    _choice(
        5,
        QuestionRole.TREATMENT_DAY,
        "Hoje é dia de algum tratamento?",
        [
            (de.TREATMENT_NENHUM, "Nenhum"),
            (de.TREATMENT_QUIMIO, "Quimioterapia"),
            (de.TREATMENT_RADIO, "Radioterapia"),
            (de.TREATMENT_HORMONIO, "Hormonioterapia"),
            (de.TREATMENT_POS_CIRURGICO, "Pós-cirúrgico"),
        ],
    ),
    _choice(
        6,
        QuestionRole.SLEEP,
        "Você dormiu bem?",
        [
            (de.SLEEP_BOM, "Dormi bem"),
            (de.SLEEP_MEH, "Mais ou menos"),
            (de.SLEEP_NAO, "Dormi mal"),
        ],
    ),
    _choice(
        7,
        QuestionRole.EMOTIONAL_STATE,
        "Como você está emocionalmente?",
        [
            (de.EMO_BEM, "Bem"),
            (de.EMO_ANSI, "Ansiosa"),
            (de.EMO_TRISTE, "Triste"),
            (de.EMO_MUITO_ABALADA, "Muito abalada"),
        ],
    ),
    _choice(
        8,
        QuestionRole.SAFETY,
        "Você se sente segura para se exercitar hoje?",
        [
            (de.SAFETY_SIM, "Sim"),
            (de.SAFETY_POUCO, "Um pouco"),
            (de.SAFETY_DUVIDA, "Tenho dúvidas"),
            (de.SAFETY_NAO, "Não"),
        ],
    ),
    _choice(
        9,
        QuestionRole.DISCOMFORT,
        "Sente algum desconforto específico (peito, braço, cicatriz)?",
        [
            (de.DISCONFORTO_NAO, "Não"),
            (de.DISCONFORTO_SIM, "Sim"),
        ],
    ),
    _choice(
        10,
        QuestionRole.CONSULTATION_INTEREST,
        "Gostaria de conversar com um profissional sobre seu treino?",
        [
            (de.CONSULT_NO, "Não, obrigada"),
            (de.CONSULT_YES, "Sim, quero uma consulta"),
        ],
    ),
]

INITIAL_ASSESSMENT_QUESTIONS: List[Dict[str, Any]] = [
    {
        "order": 1,
        "text": "Você está em tratamento oncológico atualmente?",
        "question_type": QuestionType.YES_NO,
    },
    {
        "order": 2,
        "text": "Você praticava atividade física antes do diagnóstico?",
        "question_type": QuestionType.YES_NO,
    },
    {
        "order": 3,
        "text": "De 0 a 10, quanto você se sente preparada para começar a se exercitar?",
        "question_type": QuestionType.SCALE_0_10,
    },
    {
        "order": 4,
        "text": "Qual é o seu principal objetivo?",
        "question_type": QuestionType.MULTIPLE_CHOICE,
        "options": [
            {"token": "GOAL_DISPOSICAO", "label": "Ter mais disposição"},
            {"token": "GOAL_FORCA", "label": "Recuperar força"},
            {"token": "GOAL_EMOCIONAL", "label": "Cuidar do emocional"},
            {"token": "GOAL_ROTINA", "label": "Criar uma rotina"},
        ],
    },
    {
        "order": 5,
        "text": "Gostaria de uma consulta com um especialista?",
        "question_type": QuestionType.MULTIPLE_CHOICE,
        "options": [
            {"token": de.CONSULT_YES, "label": "Sim"},
            {"token": de.CONSULT_NO, "label": "Agora não"},
        ],
    },
]

BASELINE_QUIZZES = {
    QuizPurpose.DAILY_CHECKIN: (
        "Check-in diário",
        "Avaliação rápida para saber se hoje é um bom dia para treinar.",
        DAILY_CHECKIN_QUESTIONS,
    ),
    QuizPurpose.INITIAL_ASSESSMENT: (
        "Avaliação inicial",
        "Conhecendo você antes do primeiro treino.",
        INITIAL_ASSESSMENT_QUESTIONS,
    ),
}


def ensure_baseline_quizzes(db: Session) -> List[Quiz]:
    """
    Create and activate the baseline quiz of every purpose that has none.

    Args:
        db: Database session

    Returns:
        The quizzes created by this call (empty when nothing was missing)
    """
    created = []
    for purpose, (name, description, questions) in BASELINE_QUIZZES.items():
        exists = db.query(Quiz.id).filter(Quiz.purpose == purpose).first()
        if exists is not None:
            logger.debug(f"Baseline {purpose.value} quiz skipped; one already exists")
            continue
        quiz = create_quiz(
            db,
            name=name,
            purpose=purpose,
            description=description,
            is_active=True,
            questions=questions,
        )
        logger.info(f"Seeded baseline {purpose.value} quiz {quiz.id}")
        created.append(quiz)
    return created
