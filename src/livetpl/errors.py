from __future__ import annotations

"""Exception and warning taxonomy shared by every livetpl component."""


class TemplateError(Exception):
    """Base class for failures that abort a templating session."""


class TemplateSyntaxError(TemplateError, ValueError):
    """Raised when a marker cannot be classified or its regex is unusable."""

    def __init__(self, text: str, reason: str | None = None) -> None:
        self.text = text
        self.reason = reason
        msg = f"invalid template marker {text!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class CompletionProviderError(TemplateError):
    """Raised when a completion provider fails while the user is typing."""


class SessionBusyError(TemplateError, RuntimeError):
    """Raised when a session is started while another one is still running."""


class InvariantViolation(AssertionError):
    """Offset bookkeeping went inconsistent. Always a programming error."""


class NoMatchWarning(UserWarning):
    """A variable index has no occurrence inside the region; it is skipped."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"no occurrence of variable #{index} in region")
