"""
Button Men rules-resolution engine.

Determines which attacks are legal for a roster of dice, enumerates the
attacker/defender combinations for each attack type and resolves the
chosen attack, letting die skills hook into the legal-attack list and the
capture step.
"""

__version__ = "0.1.0"
