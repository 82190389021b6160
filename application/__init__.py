"""
Application Layer for the challenge engine.

This package contains:
- ports/: Abstract repository and event interfaces (what the engine needs)
- use_cases/: Challenge creation and membership workflows
- exceptions.py: Error taxonomy shared across layers
"""
