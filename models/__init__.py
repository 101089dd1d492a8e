# models/__init__.py
# Model registry, imported by app.py so that create_all and Migrate see every table

from .evaluator import Evaluator
from .user import User
from .problem_statement import ProblemStatement
from .team import Team
from .round import Round
from .parameter import Parameter
from .evaluation import Evaluation
