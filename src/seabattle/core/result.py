from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from src.seabattle.game.errors import GameError

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    success: bool
    data: T | None = None
    error: str = ""
    code: str = ""

    @classmethod
    def ok(cls, data: T = None) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, code: str = "error") -> ServiceResult[T]:
        return cls(success=False, error=message, code=code)

    @classmethod
    def from_error(cls, exc: GameError) -> ServiceResult[T]:
        """Report a rule violation as a failed result instead of raising it."""
        return cls.fail(exc.message, exc.code)

    def carry(self) -> ServiceResult:
        """Re-wrap a failure so it can be returned from a differently typed call."""
        return ServiceResult.fail(self.error, self.code)
