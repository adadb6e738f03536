"""
Quiz Grader - deterministic scoring for typed quizzes.

This package grades quiz submissions against stored answer keys
(true/false, multiple choice and free text questions), records scores
under an explicit repeat-attempt policy, and builds leaderboards.
"""

__version__ = "1.0.0"
__author__ = "Quiz Grader Team"
