"""Domain models and errors.

Plain data (Pydantic v2) and the error taxonomy of a run. No HTTP, no CLI.
"""
