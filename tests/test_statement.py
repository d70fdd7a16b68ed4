import dataclasses

import pytest

from paratable.statement import (
    AttestationKind,
    AttestedCandidate,
    DoubleSign,
    DoubleSignKind,
    IssuedAndInvalidity,
    IssuedAndValidity,
    MultipleCandidates,
    SignedStatement,
    Statement,
    StatementKind,
    Summary,
    UnauthorizedStatement,
    ValidityAndInvalidity,
    ValidityAttestation,
)


def test_candidate_constructor():
    statement = Statement.candidate((2, 100))
    assert statement.kind is StatementKind.CANDIDATE
    assert statement.payload == (2, 100)


def test_valid_and_invalid_constructors():
    assert Statement.valid(100) == Statement(StatementKind.VALID, 100)
    assert Statement.invalid(100) == Statement(StatementKind.INVALID, 100)
    assert Statement.valid(100) != Statement.invalid(100)


def test_statement_kind_codec_indices():
    assert Statement.candidate((2, 100)).kind.value == 1
    assert Statement.valid(100).kind.value == 2
    assert Statement.invalid(100).kind.value == 3


def test_signed_statement_equality_and_hash():
    a = SignedStatement(Statement.candidate((2, 100)), 1, 1)
    b = SignedStatement(Statement.candidate((2, 100)), 1, 1)
    c = SignedStatement(Statement.candidate((2, 100)), 999, 1)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


def test_signed_statement_is_frozen():
    signed = SignedStatement(Statement.valid(100), 2, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        signed.signature = 3
    assert signed.signature == 2
    assert signed == SignedStatement(Statement.valid(100), 2, 2)


def test_multiple_candidates_equality():
    found = MultipleCandidates(first=((2, 100), 1), second=((2, 999), 1))
    assert found == MultipleCandidates(((2, 100), 1), ((2, 999), 1))
    assert found != MultipleCandidates(((2, 999), 1), ((2, 100), 1))


def test_unauthorized_statement_wraps_signed():
    inner = SignedStatement(Statement.valid(100), 2, 2)
    record = UnauthorizedStatement(inner)
    assert record.statement.statement.payload == 100
    assert record == UnauthorizedStatement(SignedStatement(Statement.valid(100), 2, 2))


def test_double_vote_variants_are_distinct():
    issued_valid = IssuedAndValidity(((2, 100), 1), (100, 1))
    issued_invalid = IssuedAndInvalidity(((2, 100), 1), (100, 1))
    assert issued_valid != issued_invalid
    assert ValidityAndInvalidity(100, 2, 2) == ValidityAndInvalidity(100, 2, 2)
    assert ValidityAndInvalidity(100, 2, 3).invalid_signature == 3


def test_double_sign_fields():
    ds = DoubleSign(DoubleSignKind.VALIDITY, 100, 2, 222)
    assert ds.kind is DoubleSignKind.VALIDITY
    assert (ds.subject, ds.first, ds.second) == (100, 2, 222)
    assert ds != DoubleSign(DoubleSignKind.INVALIDITY, 100, 2, 222)


def test_summary_fields():
    summary = Summary(candidate=100, group_id=2, validity_votes=1, signalled_bad=False)
    assert summary == Summary(100, 2, 1, False)
    assert summary.validity_votes == 1


def test_attested_candidate_turns_votes_into_tuple():
    votes = [(1, ValidityAttestation(AttestationKind.IMPLICIT, 1))]
    attested = AttestedCandidate(2, (2, 100), votes)
    assert attested.validity_votes == ((1, ValidityAttestation(AttestationKind.IMPLICIT, 1)),)
    votes.append((2, ValidityAttestation(AttestationKind.EXPLICIT, 2)))
    assert len(attested.validity_votes) == 1


def test_attested_candidate_default_votes_empty():
    assert AttestedCandidate(2, (2, 100)).validity_votes == ()


def test_attestation_kinds_differ():
    assert ValidityAttestation(AttestationKind.IMPLICIT, 5) != ValidityAttestation(
        AttestationKind.EXPLICIT, 5
    )