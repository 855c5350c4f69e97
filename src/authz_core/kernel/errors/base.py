"""Root of the authz-core error hierarchy."""
from __future__ import annotations

from typing import Any, ClassVar


class BaseError(Exception):
    """Every error authz-core raises or returns.

    ``message`` is always fit to show to an operator or on a sign-in form.
    Keyword arguments other than ``code`` and ``cause`` are kept in
    :attr:`context` (``None`` values dropped) and travel with
    :meth:`to_dict` into log lines.

    ``retryable`` tells callers whether the same request may succeed later
    without any change on their side.
    """

    default_code: ClassVar[str] = "authz_error"
    retryable: ClassVar[bool] = False

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        cause: BaseException | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.cause = cause
        self.context: dict[str, Any] = {k: v for k, v in context.items() if v is not None}
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        extra = "".join(f", {key}={value!r}" for key, value in self.context.items())
        return f"{type(self).__name__}({self.message!r}, code={self.code!r}{extra})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.context:
            payload["context"] = dict(self.context)
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]
