import posixpath
import re
from urllib.parse import SplitResult, parse_qs, unquote, urlsplit, urlunsplit

from pydantic import ValidationError

from .errors import InvalidSourceError, UnsupportedSourceError
from .models.Source import Source

GITHUB_PREFIX = "github.com"
GITHUB_SSH_PREFIX = "git@"
GENERIC_GIT_PREFIX = "git::"

SUBDIR_DELIMITER = "//"

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_source(raw: str) -> Source:
    """
    Parse a module source string into a Source.
    Supports the Git/GitHub forms of module sources:
      - github.com/org/repo//subdir?ref=v1
      - git@github.com:org/repo.git//subdir?ref=v1
      - git::<scheme>://host/repo.git//subdir?ref=v1

    Raises UnsupportedSourceError for any other form and InvalidSourceError
    for a known form that cannot be parsed.
    """
    if raw.startswith(GITHUB_PREFIX):
        return _parse_github(raw)
    if raw.startswith(GITHUB_SSH_PREFIX):
        return _parse_github_ssh(raw)
    if raw.startswith(GENERIC_GIT_PREFIX):
        return _parse_generic_git(raw)
    raise UnsupportedSourceError(
        raw, f"{raw!r} is not a github.com, git@ or git:: source"
    )


def split_subdir(path: str) -> tuple[str, str]:
    """
    Split a path on its first `//` into (path, subdir).
    The subdir keeps a leading `/` and any further `//` verbatim.
    """
    path, sep, subdir = path.partition(SUBDIR_DELIMITER)
    if not sep or not subdir:
        return path, ""
    return path, "/" + subdir


def split_url_subdir(parts: SplitResult) -> tuple[SplitResult, str]:
    """
    Split the subdir off an encoded URL path. The returned parts stay encoded;
    the subdir is decoded.
    """
    path, subdir = split_subdir(parts.path)
    return parts._replace(path=path), unquote(subdir)


def _parse_github(raw: str) -> Source:
    parts = _split_url(raw, "https://" + raw)
    ref = _query_ref(parts)
    parts, subdir = split_url_subdir(parts)
    path = _trim_git_suffix(parts.path)
    host = _host(parts)
    url = urlunsplit(("https", host, path, "", "")) + ".git"
    return _build(
        raw,
        url=url,
        path=_join(_safe_host(host), unquote(path)),
        subdir=subdir,
        ref=ref,
    )


def _parse_github_ssh(raw: str) -> Source:
    # Only the GitHub flavour of scp-like addresses is accepted here, which is
    # always git@host:path. The remainder is not a URL; the query is split
    # off the same way urlsplit would do it.
    remainder = raw[len(GITHUB_SSH_PREFIX):]
    _check_url_text(raw, remainder)

    rest = remainder.partition("#")[0]
    rest, _, query = rest.partition("?")
    host, sep, opaque = rest.partition(":")
    host = host.lower()
    if not sep or not host:
        raise InvalidSourceError(raw, f"invalid URL inside {raw!r}: expected git@host:path")
    if "/" in host:
        raise InvalidSourceError(raw, f"invalid host {host!r} inside {raw!r}")

    ref = _first_ref(query)
    opaque, subdir = split_subdir(opaque)
    return _build(
        raw,
        url=f"{GITHUB_SSH_PREFIX}{host}:{opaque}",
        path=_trim_git_suffix(_join(host, opaque)),
        subdir=subdir,
        ref=ref,
    )


def _parse_generic_git(raw: str) -> Source:
    parts = _split_url(raw, raw[len(GENERIC_GIT_PREFIX):])
    if not parts.path:
        raise InvalidSourceError(raw, f"source {raw!r} is missing the path component")

    parts, subdir = split_url_subdir(parts)
    ref = _query_ref(parts)
    parts = parts._replace(query="", fragment="")
    # ':' from a host port is not allowed inside a path segment.
    path = _trim_git_suffix(_join(_safe_host(_host(parts)), unquote(parts.path)))
    return _build(
        raw,
        url=urlunsplit(parts),
        path=path,
        subdir=subdir,
        ref=ref,
    )


def _build(raw: str, **fields: str) -> Source:
    try:
        return Source(raw=raw, **fields)
    except ValidationError as exc:
        raise InvalidSourceError(raw, cause=exc) from exc


def _check_url_text(raw: str, text: str) -> None:
    if text[:1].isspace():
        raise InvalidSourceError(raw, f"{raw!r} has leading whitespace")
    if _CONTROL_CHARS_RE.search(text):
        raise InvalidSourceError(raw, f"{raw!r} contains a control character")
    # The query is not validated, bad pairs are dropped when it is decoded.
    if _BAD_ESCAPE_RE.search(text.partition("?")[0]):
        raise InvalidSourceError(raw, f"{raw!r} contains an invalid percent-escape")


def _split_url(raw: str, text: str) -> SplitResult:
    """
    urlsplit with the checks a strict URL parser would apply.
    """
    _check_url_text(raw, text)
    try:
        parts = urlsplit(text)
        # Accessing the port validates it.
        parts.port
    except ValueError as exc:
        raise InvalidSourceError(raw, f"{raw!r} is not a URL", cause=exc) from exc

    if not parts.scheme and ":" in parts.path.split("/", 1)[0]:
        raise InvalidSourceError(
            raw, f"{raw!r} is not a URL: first path segment contains a colon"
        )
    return parts


def _query_ref(parts: SplitResult) -> str:
    return _first_ref(parts.query)


def _first_ref(query: str) -> str:
    return parse_qs(query).get("ref", [""])[0]


def _host(parts: SplitResult) -> str:
    # netloc without userinfo, keeping the port.
    return parts.netloc.rpartition("@")[2]


def _safe_host(host: str) -> str:
    return host.replace(":", "-")


def _trim_git_suffix(path: str) -> str:
    return path.removesuffix(".git")


def _join(*parts: str) -> str:
    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    return posixpath.normpath(joined)
