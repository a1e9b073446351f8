from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator, model_validator


class Source(BaseModel):
    """
    Data model for a parsed module source.

    A Source is a snapshot of a single parse call. Re-parsing ``raw`` gives an
    equal Source, but parsing ``url`` again is not guaranteed to: the scheme,
    query string and subdir are normalized away.
    """

    model_config = ConfigDict(frozen=True)

    raw: StrictStr
    url: StrictStr
    path: StrictStr
    subdir: StrictStr = ""
    ref: StrictStr = ""

    @model_validator(mode="before")
    def validate_not_empty(cls, values: dict[str, Any]) -> dict[str, Any]:
        if not all(values.get(field) for field in ("url", "path")):
            raise ValueError("`url` and `path` must be non-empty strings")
        return values

    @field_validator("subdir")
    def validate_subdir(cls, subdir: str) -> str:
        if subdir and not subdir.startswith("/"):
            raise ValueError(f"subdir must start with '/': {subdir!r}")
        return subdir

    @field_validator("path")
    def validate_path(cls, path: str) -> str:
        if ":" in path:
            raise ValueError(f"path must not contain ':': {path!r}")
        return path
