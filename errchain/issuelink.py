"""Issue tracker links and "unimplemented feature" errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .canonicaljson import canonicalize, load_object
from .chain import Wrapper
from .registry import DEFAULT_REGISTRY, Registry
from .search import find_all, find_first


@dataclass(frozen=True)
class IssueLink:
    issue_url: str = ""
    detail: str = ""

    def to_dict(self) -> dict:
        return {"issue_url": self.issue_url, "detail": self.detail}

    @classmethod
    def from_dict(cls, raw) -> "IssueLink":
        if not isinstance(raw, dict):
            raise ValueError("issue link must be an object")
        url, detail = raw.get("issue_url", ""), raw.get("detail", "")
        if not isinstance(url, str) or not isinstance(detail, str):
            raise ValueError("issue link fields must be strings")
        return cls(url, detail)

    def lines(self) -> list[str]:
        lines = []
        if self.issue_url:
            lines.append(f"issue: {self.issue_url}")
        if self.detail:
            lines.append(f"detail: {self.detail}")
        return lines


class WithIssueLink(Wrapper):
    """Wrapper pointing at a tracker issue; contributes no message."""

    def __init__(self, cause: BaseException, link: IssueLink):
        super().__init__(cause, "")
        self._link = link

    @property
    def link(self) -> IssueLink:
        return self._link

    def error_details(self) -> list[str]:
        return self._link.lines()


class UnimplementedError(Wrapper):
    """Root cause signalling a feature that is not implemented yet."""

    def __init__(self, link: IssueLink, message: str):
        super().__init__(None, message)
        self._link = link

    @property
    def link(self) -> IssueLink:
        return self._link

    def error_details(self) -> list[str]:
        return ["unimplemented", *self._link.lines()]


def with_issue_link(err: Optional[BaseException], link: IssueLink) -> Optional[WithIssueLink]:
    if err is None:
        return None
    return WithIssueLink(err, link)


def unimplemented_error(link: IssueLink, message: str) -> UnimplementedError:
    return UnimplementedError(link, message)


def is_unimplemented_error(err: Optional[BaseException]) -> bool:
    """Check this node only, not its causes."""
    return isinstance(err, UnimplementedError)


def has_unimplemented_error(err: Optional[BaseException]) -> bool:
    _, found = find_first(err, lambda e: (None, is_unimplemented_error(e)))
    return found


def is_issue_link(err: Optional[BaseException]) -> bool:
    return isinstance(err, WithIssueLink)


def has_issue_link(err: Optional[BaseException]) -> bool:
    _, found = find_first(err, lambda e: (None, is_issue_link(e)))
    return found


def get_all_issue_links(err: Optional[BaseException]) -> list[IssueLink]:
    """Links from every issue-link and unimplemented node, outermost first."""
    return find_all(
        err,
        lambda e: (e.link, True)
        if isinstance(e, (WithIssueLink, UnimplementedError))
        else (None, False),
    )


def encode_with_issue_link(err: WithIssueLink) -> tuple[str, list[str], bytes]:
    return "", err.error_details(), canonicalize(err.link.to_dict())


def decode_with_issue_link(
    cause: Optional[BaseException], message: str, details: Sequence[str], payload: bytes
) -> WithIssueLink:
    if cause is None:
        raise ValueError("issue link wrapper requires a cause")
    return WithIssueLink(cause, IssueLink.from_dict(load_object(payload)))


def encode_unimplemented(err: UnimplementedError) -> tuple[str, list[str], bytes]:
    return err.message, err.error_details(), canonicalize(err.link.to_dict())


def decode_unimplemented(
    cause: Optional[BaseException], message: str, details: Sequence[str], payload: bytes
) -> UnimplementedError:
    if cause is not None:
        raise ValueError("unimplemented error cannot wrap a cause")
    return UnimplementedError(IssueLink.from_dict(load_object(payload)), message)


def register(registry: Registry = DEFAULT_REGISTRY) -> None:
    registry.register_type(WithIssueLink, encode_with_issue_link, decode_with_issue_link)
    registry.register_type(UnimplementedError, encode_unimplemented, decode_unimplemented)


register()
