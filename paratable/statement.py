"""Statements exchanged between authorities and the records of misbehaviour they can prove."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Hashable, Tuple, Union


class StatementKind(enum.Enum):
    """What a statement asserts about a candidate."""

    CANDIDATE = 1
    VALID = 2
    INVALID = 3


@dataclass(frozen=True)
class Statement:
    """A statement about a candidate.

    For ``CANDIDATE`` the payload is the candidate itself; for ``VALID`` and
    ``INVALID`` it is the candidate's digest.
    """

    kind: StatementKind
    payload: Any

    @classmethod
    def candidate(cls, candidate: Any) -> "Statement":
        """Announce ``candidate`` as the sender's proposal for inclusion."""
        return cls(StatementKind.CANDIDATE, candidate)

    @classmethod
    def valid(cls, digest: Hashable) -> "Statement":
        """Attest that the candidate with ``digest`` is valid."""
        return cls(StatementKind.VALID, digest)

    @classmethod
    def invalid(cls, digest: Hashable) -> "Statement":
        """Attest that the candidate with ``digest`` is invalid."""
        return cls(StatementKind.INVALID, digest)


@dataclass(frozen=True)
class SignedStatement:
    """A statement together with its signature and sender."""

    statement: Statement
    signature: Any
    sender: Hashable


@dataclass(frozen=True)
class IssuedAndValidity:
    """Double vote: issued a candidate and also voted it valid explicitly."""

    issued: Tuple[Any, Any]
    validity: Tuple[Hashable, Any]


@dataclass(frozen=True)
class IssuedAndInvalidity:
    """Double vote: issued a candidate and also voted it invalid."""

    issued: Tuple[Any, Any]
    invalidity: Tuple[Hashable, Any]


@dataclass(frozen=True)
class ValidityAndInvalidity:
    """Double vote: voted a candidate both valid and invalid."""

    digest: Hashable
    valid_signature: Any
    invalid_signature: Any


class DoubleSignKind(enum.Enum):
    """Which kind of statement was signed twice."""

    CANDIDATE = "candidate"
    VALIDITY = "validity"
    INVALIDITY = "invalidity"


@dataclass(frozen=True)
class DoubleSign:
    """Two different signatures on the same statement.

    ``subject`` is the candidate for ``CANDIDATE`` and the digest otherwise.
    """

    kind: DoubleSignKind
    subject: Any
    first: Any
    second: Any


@dataclass(frozen=True)
class MultipleCandidates:
    """An authority declared more than one candidate."""

    first: Tuple[Any, Any]
    second: Tuple[Any, Any]


@dataclass(frozen=True)
class UnauthorizedStatement:
    """A statement submitted by an authority outside the candidate's group."""

    statement: SignedStatement


Misbehavior = Union[
    IssuedAndValidity,
    IssuedAndInvalidity,
    ValidityAndInvalidity,
    MultipleCandidates,
    UnauthorizedStatement,
    DoubleSign,
]


@dataclass(frozen=True)
class Summary:
    """The outcome of importing a statement about a candidate."""

    candidate: Hashable
    group_id: Hashable
    validity_votes: int
    signalled_bad: bool


class AttestationKind(enum.Enum):
    """How a validity attestation was given."""

    IMPLICIT = 1
    EXPLICIT = 2


@dataclass(frozen=True)
class ValidityAttestation:
    """A validity attestation: implicit by issuing, or an explicit valid vote."""

    kind: AttestationKind
    signature: Any


@dataclass(frozen=True)
class AttestedCandidate:
    """A candidate with enough validity attestations to be included."""

    group_id: Hashable
    candidate: Any
    validity_votes: Tuple[Tuple[Hashable, ValidityAttestation], ...] = field(
        default_factory=tuple
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "validity_votes", tuple(self.validity_votes))