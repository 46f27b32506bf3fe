"""
Message predicates used to pick occurrences and correlation events out of a record stream.

A matcher is either an exact message comparison, a case-insensitive whole-word
match (``\\bterm\\b``), a case-insensitive regular expression search, or the
``none`` matcher that never matches.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Pattern, Union

from engine.enums import MatcherKind
from engine.exceptions import InvalidConfiguration


@dataclass(frozen=True)
class Matcher:
    kind: MatcherKind
    value: str = ""
    _compiled: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.kind is MatcherKind.none:
            return
        if not self.value:
            raise InvalidConfiguration(f"{self.kind.value} matcher requires a non-empty value")
        if self.kind is MatcherKind.word:
            compiled = re.compile(rf"\b{re.escape(self.value)}\b", re.I)
        elif self.kind is MatcherKind.regex:
            try:
                compiled = re.compile(self.value, re.I)
            except re.error as exc:
                raise InvalidConfiguration(f"invalid pattern {self.value!r}: {exc}") from exc
        else:
            return
        object.__setattr__(self, "_compiled", compiled)

    @property
    def configured(self) -> bool:
        return self.kind is not MatcherKind.none

    def matches(self, message: str) -> bool:
        if self.kind is MatcherKind.none or not message:
            return False
        if self.kind is MatcherKind.exact:
            return message == self.value
        return self._compiled.search(message) is not None

    __call__ = matches

    def label(self) -> str:
        if self.kind is MatcherKind.none:
            return "none"
        return f"{self.kind.value}:{self.value}"


Predicate = Union[Matcher, str, Callable[[str], bool]]


def none() -> Matcher:
    return Matcher(MatcherKind.none)


def exact(message: str) -> Matcher:
    return Matcher(MatcherKind.exact, message)


def word(term: str) -> Matcher:
    return Matcher(MatcherKind.word, term)


def regex(pattern: str) -> Matcher:
    return Matcher(MatcherKind.regex, pattern)


def from_spec(kind: Union[MatcherKind, str], value: str = "") -> Matcher:
    try:
        resolved = MatcherKind(kind)
    except ValueError as exc:
        raise InvalidConfiguration(f"unknown matcher kind {kind!r}") from exc
    return Matcher(resolved, value or "")


def as_callable(predicate: Predicate) -> Callable[[str], bool]:
    # a bare string means exact message equality
    if isinstance(predicate, str):
        return exact(predicate).matches
    if isinstance(predicate, Matcher):
        return predicate.matches
    return predicate
