from .exercises import EXERCISE_TYPES, Exercise, ExerciseType, GradingError, decode_exercise
from .grader import GradingResult, grade, truth_table_solution
