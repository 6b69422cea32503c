"""
Simulation primitives.

This package intentionally contains *small* building blocks (sim time, scheduled tasks,
id allocation, collaborator contracts) shared by the gameplay systems.
"""
