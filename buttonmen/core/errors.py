"""
Exception types for the Button Men engine.

Recoverable outcomes (an attack the player may not make) are reported through
Result objects. The exceptions here signal programming errors or misuse of
the engine and are meant to propagate.
"""

from typing import Optional


class InternalInconsistencyError(RuntimeError):
    """
    Raised when engine state would become inconsistent.

    Typical causes are a skill handler leaving a hook context malformed
    (mismatched attacker/defender lists, non-die entries) or a proposal that
    references a die which is out of play or not on the table. These point at
    a bug in a skill or attack type, not at a user action.

    Attributes:
        hook: Hook being dispatched when the problem was detected (if any)
        skill_id: Skill whose handler caused it (if known)
        attack_type: Attack type being resolved (if any)
    """

    def __init__(self, message: str, hook: Optional[str] = None,
                 skill_id: Optional[str] = None, attack_type: Optional[str] = None):
        self.hook = hook
        self.skill_id = skill_id
        self.attack_type = attack_type
        super().__init__(message)

    def details(self) -> dict:
        """Diagnostic fields for logs and API error payloads."""
        return {
            'message': str(self),
            'hook': self.hook,
            'skill_id': self.skill_id,
            'attack_type': self.attack_type,
        }

    def __str__(self) -> str:
        message = super().__str__()
        context = [
            f"{name}={value}"
            for name, value in (('hook', self.hook), ('skill', self.skill_id),
                                ('attack_type', self.attack_type))
            if value
        ]
        if context:
            return f"{message} ({', '.join(context)})"
        return message


class DieOutOfPlayError(InternalInconsistencyError):
    """Raised when something tries to mutate a die that is out of play."""
    pass


class SearchLimitError(ValueError):
    """Raised when a roster is too large for the bounded attack search."""
    pass


class RegistryFrozenError(RuntimeError):
    """Raised when registering into a registry after start-up has finished."""
    pass


class DuplicateRegistrationError(ValueError):
    """Raised when an attack type or skill name is registered twice."""
    pass
