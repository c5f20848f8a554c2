"""
Learniverse: chapter comprehension quizzes for young readers.

Packages:
- quiz: question bank, question type handlers and the quiz session controller
- delivery: Rich panels for the terminal player
- cli: the 'learniverse' command
"""

__version__ = "1.0.0"
