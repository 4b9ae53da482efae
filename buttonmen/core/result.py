"""
Result object for error handling throughout the Button Men engine.

Operations that can fail for reasons a player can fix (an illegal attack, a
malformed request) return a Result object instead of raising exceptions.
Programming errors still raise; see errors.py.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """
    Machine-readable reasons an attack proposal was rejected.
    """

    INVALID_ATTACK = "invalid_attack"
    UNKNOWN_ATTACK_TYPE = "unknown_attack_type"
    ATTACK_NOT_LEGAL = "attack_not_legal"
    # A die belongs to the wrong player for its role
    WRONG_ROSTER = "wrong_roster"

    def __str__(self) -> str:
        """Return the error code value."""
        return self.value


@dataclass
class Result:
    """
    Represents the result of an operation that can succeed or fail.

    Attributes:
        success: Whether the operation succeeded
        data: The result data if successful
        error: Error message if failed
        error_code: Machine-readable error code if failed

    Examples:
        >>> result = Result.ok(record)
        >>> if result.success:
        ...     print(result.data.attack_type)

        >>> result = Result.fail("Speed attack needs one attacker", ErrorCode.INVALID_ATTACK)
        >>> if not result.success:
        ...     print(f"Error: {result.error}")
    """
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @staticmethod
    def ok(data: Any = None) -> 'Result':
        """
        Create a successful result.

        Args:
            data: Optional data to return

        Returns:
            Result with success=True
        """
        return Result(success=True, data=data)

    @staticmethod
    def fail(error: str, code: Optional[str | ErrorCode] = None) -> 'Result':
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            code: Machine-readable error code (ErrorCode enum or string)

        Returns:
            Result with success=False

        Examples:
            >>> Result.fail("Attack type is not legal", ErrorCode.ATTACK_NOT_LEGAL)
            >>> Result.fail("Validation error", "CUSTOM_ERROR")
        """
        error_code_str = code.value if isinstance(code, ErrorCode) else code
        return Result(success=False, error=error, error_code=error_code_str)

    def __bool__(self) -> bool:
        """Allow using Result in boolean context: if result: ..."""
        return self.success
