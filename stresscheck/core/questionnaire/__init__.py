# Questionnaire navigation

from stresscheck.core.questionnaire.session import QuestionnaireSession

__all__ = ["QuestionnaireSession"]
