from quiz_engine.db.base_class import Base

# Import every model so Base.metadata knows all tables
from quiz_engine.models.user import User
from quiz_engine.models.category import Category
from quiz_engine.models.quiz import Quiz
from quiz_engine.models.question import Question
from quiz_engine.models.option import Option
from quiz_engine.models.attempt import Attempt
from quiz_engine.models.answer import Answer
