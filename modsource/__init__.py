from .errors import InvalidSourceError, SourceError, UnsupportedSourceError
from .models.Source import Source
from .parse import parse_source, split_subdir

__all__ = [
    "InvalidSourceError",
    "Source",
    "SourceError",
    "UnsupportedSourceError",
    "parse_source",
    "split_subdir",
]
