"""
Daily check-in backend: questionnaire catalog, exercise-safety decision
engine and check-in history.
"""
