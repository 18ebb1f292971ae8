"""
Lesson assembly pipeline.

- lesson_builder.py: per-lesson builders and the builder registry
- budget.py: time-budget and learning-style trimming
- post_processing.py: purpose-specific presentation rules
"""

from deutschmeister.generators.budget import apply_budget
from deutschmeister.generators.lesson_builder import build_lesson, build_registry
from deutschmeister.generators.post_processing import ensure_exam_timing

__all__ = ["apply_budget", "build_lesson", "build_registry", "ensure_exam_timing"]
