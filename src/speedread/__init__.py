"""Speed-reading trainer: paced reading, comprehension quizzes and analytics."""

__version__ = "0.1.0"
