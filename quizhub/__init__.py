"""QuizHub - quiz progress, achievements and badges"""

__version__ = "1.0.0"
