"""The statement table: collects votes on candidates and detects provable misbehaviour."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

from paratable.statement import (
    AttestationKind,
    AttestedCandidate,
    DoubleSign,
    DoubleSignKind,
    IssuedAndInvalidity,
    IssuedAndValidity,
    Misbehavior,
    MultipleCandidates,
    SignedStatement,
    Statement,
    StatementKind,
    Summary,
    UnauthorizedStatement,
    ValidityAndInvalidity,
    ValidityAttestation,
)


class Context(abc.ABC):
    """Knowledge about candidates and groups that the table relies on."""

    @abc.abstractmethod
    def candidate_digest(self, candidate: Any) -> Hashable:
        """Return the digest uniquely identifying ``candidate``."""

    @abc.abstractmethod
    def candidate_group(self, candidate: Any) -> Hashable:
        """Return the group ``candidate`` belongs to."""

    @abc.abstractmethod
    def is_member_of(self, authority: Hashable, group: Hashable) -> bool:
        """Whether ``authority`` may submit and vote on candidates of ``group``."""

    @abc.abstractmethod
    def requisite_votes(self, group: Hashable) -> int:
        """Number of validity votes a candidate of ``group`` needs."""


class VoteKind(enum.Enum):
    """The ways an authority can vote on a candidate's validity."""

    ISSUED = 1
    VALID = 2
    INVALID = 3


@dataclass(frozen=True)
class ValidityVote:
    """A vote on validity together with its signature."""

    kind: VoteKind
    signature: Any


@dataclass
class CandidateData:
    """A candidate and the votes cast on it."""

    group_id: Hashable
    candidate: Any
    validity_votes: Dict[Hashable, ValidityVote] = field(default_factory=dict)
    indicated_bad_by: List[Hashable] = field(default_factory=list)

    def indicated_bad(self) -> bool:
        """Whether any authority has voted this candidate invalid."""
        return bool(self.indicated_bad_by)

    def can_be_included(self, validity_threshold: int) -> bool:
        """Whether there are enough votes and nobody has called the candidate bad."""
        return not self.indicated_bad_by and len(self.validity_votes) >= validity_threshold

    def attested(self, validity_threshold: int) -> Optional[AttestedCandidate]:
        """Return a full attestation if the candidate can be included, else ``None``."""
        if not self.can_be_included(validity_threshold):
            return None
        attestations = [
            (authority, _attestation(vote))
            for authority, vote in self.validity_votes.items()
            if vote.kind is not VoteKind.INVALID
        ][:validity_threshold]
        if len(attestations) != validity_threshold:
            raise RuntimeError("includable candidate lacks enough validity votes")
        return AttestedCandidate(
            group_id=self.group_id,
            candidate=self.candidate,
            validity_votes=tuple(attestations),
        )

    def summary(self, digest: Hashable) -> Summary:
        """Summarise the current state of this candidate."""
        return Summary(
            candidate=digest,
            group_id=self.group_id,
            validity_votes=len(self.validity_votes) - len(self.indicated_bad_by),
            signalled_bad=self.indicated_bad(),
        )


def _attestation(vote: ValidityVote) -> ValidityAttestation:
    kind = AttestationKind.IMPLICIT if vote.kind is VoteKind.ISSUED else AttestationKind.EXPLICIT
    return ValidityAttestation(kind, vote.signature)


class _Misbehaved(Exception):
    def __init__(self, misbehavior: Misbehavior) -> None:
        super().__init__(misbehavior)
        self.misbehavior = misbehavior


_DOUBLE_SIGN_KINDS = {
    VoteKind.ISSUED: DoubleSignKind.CANDIDATE,
    VoteKind.VALID: DoubleSignKind.VALIDITY,
    VoteKind.INVALID: DoubleSignKind.INVALIDITY,
}


def _conflict(
    existing: ValidityVote, new: ValidityVote, candidate: Any, digest: Hashable
) -> Misbehavior:
    if existing.kind is new.kind:
        subject = candidate if existing.kind is VoteKind.ISSUED else digest
        return DoubleSign(
            _DOUBLE_SIGN_KINDS[existing.kind], subject, existing.signature, new.signature
        )
    sigs = {existing.kind: existing.signature, new.kind: new.signature}
    kinds = set(sigs)
    if kinds == {VoteKind.ISSUED, VoteKind.VALID}:
        return IssuedAndValidity(
            (candidate, sigs[VoteKind.ISSUED]), (digest, sigs[VoteKind.VALID])
        )
    if kinds == {VoteKind.ISSUED, VoteKind.INVALID}:
        return IssuedAndInvalidity(
            (candidate, sigs[VoteKind.ISSUED]), (digest, sigs[VoteKind.INVALID])
        )
    return ValidityAndInvalidity(digest, sigs[VoteKind.VALID], sigs[VoteKind.INVALID])


class Table:
    """Stores statements on candidates and the misbehaviour they reveal."""

    def __init__(self) -> None:
        self._proposals: Dict[Hashable, Tuple[Hashable, Any]] = {}
        self._misbehavior: Dict[Hashable, Misbehavior] = {}
        self._candidate_votes: Dict[Hashable, CandidateData] = {}
        self._includable: Dict[Hashable, int] = {}

    def proposed_candidates(self, context: Context) -> List[AttestedCandidate]:
        """The best includable candidate of each group, sorted by group id.

        Among several includable candidates of one group the smallest wins.
        """
        best: Dict[Hashable, Tuple[CandidateData, int]] = {}
        for data in self._candidate_votes.values():
            if data.group_id not in self._includable:
                continue
            threshold = context.requisite_votes(data.group_id)
            if not data.can_be_included(threshold):
                continue
            current = best.get(data.group_id)
            if current is None:
                best[data.group_id] = (data, threshold)
            elif current[0].candidate > data.candidate:
                best[data.group_id] = (data, current[1])
        result = []
        for group in sorted(best):
            data, threshold = best[group]
            attested = data.attested(threshold)
            if attested is None:
                raise RuntimeError("includable candidate could not be attested")
            result.append(attested)
        return result

    def candidate_includable(self, digest: Hashable, context: Context) -> bool:
        """Whether the candidate with ``digest`` can be included."""
        data = self._candidate_votes.get(digest)
        if data is None:
            return False
        return data.can_be_included(context.requisite_votes(data.group_id))

    def import_statement(
        self, context: Context, statement: SignedStatement
    ) -> Optional[Summary]:
        """Import a signed statement.

        Returns a summary of the referenced candidate, or ``None`` when the
        statement was a duplicate, referenced an unknown candidate, or proved
        misbehaviour (which is then recorded against the sender).
        """
        inner = statement.statement
        sender = statement.sender
        try:
            if inner.kind is StatementKind.CANDIDATE:
                return self._import_candidate(
                    context, sender, inner.payload, statement.signature
                )
            kind = VoteKind.VALID if inner.kind is StatementKind.VALID else VoteKind.INVALID
            return self._validity_vote(
                context, sender, inner.payload, ValidityVote(kind, statement.signature)
            )
        except _Misbehaved as exc:
            self._misbehavior[sender] = exc.misbehavior
            return None

    def get_candidate(self, digest: Hashable) -> Optional[Any]:
        """The candidate with ``digest``, or ``None`` if unknown."""
        data = self._candidate_votes.get(digest)
        return None if data is None else data.candidate

    def misbehavior(self) -> Mapping[Hashable, Misbehavior]:
        """All misbehaviour witnessed so far, keyed by authority."""
        return MappingProxyType(self._misbehavior)

    def includable_count(self) -> int:
        """The number of groups with at least one includable candidate."""
        return len(self._includable)

    def _import_candidate(
        self, context: Context, sender: Hashable, candidate: Any, signature: Any
    ) -> Optional[Summary]:
        group = context.candidate_group(candidate)
        if not context.is_member_of(sender, group):
            raise _Misbehaved(
                UnauthorizedStatement(
                    SignedStatement(Statement.candidate(candidate), signature, sender)
                )
            )

        digest = context.candidate_digest(candidate)
        proposal = self._proposals.get(sender)
        if proposal is not None:
            old_digest, old_signature = proposal
            if old_digest != digest:
                old_candidate = self._candidate_votes[old_digest].candidate
                raise _Misbehaved(
                    MultipleCandidates(
                        first=(old_candidate, old_signature),
                        second=(candidate, signature),
                    )
                )
        else:
            self._proposals[sender] = (digest, signature)
            self._candidate_votes.setdefault(digest, CandidateData(group, candidate))

        return self._validity_vote(
            context, sender, digest, ValidityVote(VoteKind.ISSUED, signature)
        )

    def _validity_vote(
        self, context: Context, sender: Hashable, digest: Hashable, vote: ValidityVote
    ) -> Optional[Summary]:
        data = self._candidate_votes.get(digest)
        if data is None:
            return None

        threshold = context.requisite_votes(data.group_id)
        was_includable = data.can_be_included(threshold)

        if not context.is_member_of(sender, data.group_id):
            if vote.kind is VoteKind.ISSUED:
                raise RuntimeError("issuance vote cast without group membership check")
            statement = (
                Statement.valid(digest)
                if vote.kind is VoteKind.VALID
                else Statement.invalid(digest)
            )
            raise _Misbehaved(
                UnauthorizedStatement(SignedStatement(statement, vote.signature, sender))
            )

        existing = data.validity_votes.get(sender)
        if existing is not None:
            if existing == vote:
                return None
            raise _Misbehaved(_conflict(existing, vote, data.candidate, digest))

        if vote.kind is VoteKind.INVALID:
            data.indicated_bad_by.append(sender)
        data.validity_votes[sender] = vote

        self._update_includable(data.group_id, was_includable, data.can_be_included(threshold))
        return data.summary(digest)

    def _update_includable(self, group: Hashable, was: bool, now: bool) -> None:
        if was and not now and group in self._includable:
            self._includable[group] -= 1
            if self._includable[group] == 0:
                del self._includable[group]
        if not was and now:
            self._includable[group] = self._includable.get(group, 0) + 1