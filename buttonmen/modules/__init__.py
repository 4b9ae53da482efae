"""
Engine modules.

Each package here provides a Module subclass (see base.py) that the
ModuleLoader discovers and registers.
"""
