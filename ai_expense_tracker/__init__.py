"""
AI Expense Tracker - Source Package

A small expense-entry assistant with two input paths:
a manual form, and free text or voice turned into an expense by Gemini.

DESIGN PRINCIPLES:
1. The LLM structures text; it never decides what gets saved
2. Model output is untrusted: strip, parse, default
3. Every failure returns the page to an interactive state
4. External capabilities (LLM, speech) are injected, never global
"""

__version__ = "1.0.0"
__author__ = "AI Expense Tracker Team"
