from typing import Optional


class SourceError(ValueError):
    """
    Base error for module sources that cannot be parsed.
    """

    kind = "module source error"

    def __init__(self, raw: str, detail: str = "") -> None:
        self.raw = raw
        self.detail = detail or repr(raw)
        super().__init__(f"{self.kind}: {self.detail}")


class UnsupportedSourceError(SourceError):
    """
    The source does not match any of the github.com, git@ or git:: forms.
    """

    kind = "unsupported module source"


class InvalidSourceError(SourceError):
    """
    The source matches a known form but is malformed.
    """

    kind = "invalid module source"

    def __init__(
        self, raw: str, detail: str = "", cause: Optional[Exception] = None
    ) -> None:
        self.cause = cause
        if cause is not None:
            detail = f"{detail or repr(raw)}: {cause}"
        super().__init__(raw, detail)
