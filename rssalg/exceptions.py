"""
Exception hierarchy for cross-validation experiments.

Every fatal condition raised by the experiment runner derives from
RSSalgError. Wrapping always uses ``raise ... from err`` so the full causal
chain is available to the CLI, which shows the innermost message to the
user and logs the rest.
"""

from __future__ import annotations

from typing import List


class RSSalgError(Exception):
    """Base class for all experiment errors."""


class SettingsError(RSSalgError):
    """A settings category could not be read or holds an invalid value."""


class SplitterNotSpecifiedError(SettingsError):
    """Multiple splits were requested without a feature splitter."""


class DatasetError(RSSalgError):
    """The source dataset is missing or malformed."""


class FoldLoadError(RSSalgError):
    """A fold directory is missing or corrupt."""


class SplitError(RSSalgError):
    """A feature splitter failed to create views."""


class ResultsStoreError(RSSalgError):
    """The results document could not be read or written."""


class InsufficientFoldsError(RSSalgError):
    """Sample standard deviation needs at least two values."""


def exception_chain(exc: BaseException) -> List[BaseException]:
    """Return the causal chain of an exception, outermost first."""
    chain = [exc]
    seen = {id(exc)}
    current = exc
    while True:
        nxt = current.__cause__ or current.__context__
        if nxt is None or id(nxt) in seen:
            break
        chain.append(nxt)
        seen.add(id(nxt))
        current = nxt
    return chain


def root_cause(exc: BaseException) -> BaseException:
    """Return the innermost exception of a chain."""
    return exception_chain(exc)[-1]


def format_chain(exc: BaseException) -> str:
    """Render a chain as ``Outer: msg <- Inner: msg`` for logging."""
    return " <- ".join(
        f"{type(e).__name__}: {e}" for e in exception_chain(exc)
    )
