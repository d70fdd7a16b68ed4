# paratable

`paratable` keeps track of the statements that authorities make about
parachain candidates. It decides which candidates have gathered enough
validity votes to be put forward for inclusion, and it records any provable
misbehaviour. It also includes a small "adder" parachain and a collator for
it, which are useful for experiments.

## Installation

```
pip install paratable
```

To run the tests, install the `test` extra and run `pytest`:

```
pip install "paratable[test]"
pytest
```

## The statement table (`paratable.statement`, `paratable.table`)

Authorities broadcast three kinds of statement:

- `Statement.candidate(candidate)`: "this is my candidate". Issuing a
  candidate also counts as a validity vote for it.
- `Statement.valid(digest)`: "the candidate with this digest is valid".
- `Statement.invalid(digest)`: "the candidate with this digest is invalid".

Each statement is wrapped in a `SignedStatement` together with its signature
and its sender, and fed into a `Table`.

The table needs a `Context`, an abstract class with four methods:

- `candidate_digest(candidate)`: the candidate's digest;
- `candidate_group(candidate)`: the group the candidate belongs to;
- `is_member_of(authority, group)`: whether an authority is a member of a group;
- `requisite_votes(group)`: how many validity votes a group needs.

```python
from paratable.statement import Statement, SignedStatement
from paratable.table import Context, Table


class MyContext(Context):
    def __init__(self, members):
        self.members = members          # authority -> group

    def candidate_digest(self, candidate):
        return candidate[1]

    def candidate_group(self, candidate):
        return candidate[0]

    def is_member_of(self, authority, group):
        return self.members.get(authority) == group

    def requisite_votes(self, group):
        size = sum(1 for g in self.members.values() if g == group)
        return size // 2 + 1


context = MyContext({1: 2, 2: 2, 3: 2})
table = Table()

summary = table.import_statement(
    context, SignedStatement(Statement.candidate((2, 100)), signature=1, sender=1)
)
table.import_statement(
    context, SignedStatement(Statement.valid(100), signature=2, sender=2)
)

table.candidate_includable(100, context)   # True
table.proposed_candidates(context)         # [AttestedCandidate(...)]
```

`import_statement` returns a `Summary` (digest, group, number of validity
votes less invalidity votes, and whether anyone has signalled the candidate
bad). It returns `None` when the statement was a duplicate, referred to an
unknown candidate, or revealed misbehaviour.

Misbehaviour is recorded per authority; `table.misbehavior()` returns a
read-only mapping of it. Only the latest misbehaviour of each authority is
kept. The kinds are:

- `MultipleCandidates`: the authority issued two different candidates.
- `UnauthorizedStatement`: the authority made a statement about a group it is
  not a member of.
- `IssuedAndValidity`, `IssuedAndInvalidity`, `ValidityAndInvalidity`: the
  authority voted more than one way on the same candidate.
- `DoubleSign`: the authority signed the same statement twice with different
  signatures (`DoubleSignKind.CANDIDATE`, `VALIDITY` or `INVALIDITY`).

A candidate is includable when it has at least the requisite number of votes
and nobody has voted it invalid. `proposed_candidates(context)` returns at
most one `AttestedCandidate` per group, sorted by group id; for each group it
picks the smallest includable candidate. Its `validity_votes` hold
`ValidityAttestation`s, `IMPLICIT` for issuance and `EXPLICIT` for a valid
vote. `includable_count()` gives the number of groups with an includable
candidate, and `get_candidate(digest)` looks a candidate up.

The table does not check signatures: it trusts that statements handed to it
have already been verified.

## The adder parachain (`paratable.adder`)

A parachain whose state is a single unsigned 64-bit number:

- Each block adds a value to that number, wrapping on overflow.
- `HeadData` (number, parent hash, post-state hash) and `BlockData` (state,
  add) have compact little-endian encodings via `encode()` and `decode()`;
  `decode()` raises `ValueError` on truncated input.
- `keccak256(data)` and `hash_state(state)` give Keccak-256 digests;
  `HeadData.hash()` hashes the encoded head.

`execute(parent_hash, parent_head, block_data)` produces the next head. It
raises `StateMismatch` if the block's starting state does not match the hash
stored in the parent head.

`validate(parent_head, block_data)` takes encoded bytes and returns the
encoded new head.

## The collator (`paratable.collator`)

`AdderCollator.produce_candidate(last_head, ingress=())` builds the next
block on top of an encoded head and returns the encoded body and new head,
printing a line for each collation. It remembers every body it has produced;
it raises `InvalidHead` for heads it cannot decode. Ingress messages are
ignored.

The `adder-collator` command prints the genesis head as a list of bytes and
as hex, then produces `--blocks` collations (default 0) locally on top of it:

```
adder-collator
adder-collator --blocks 5
```

## What this package does not do

The collator does not connect to any network, relay chain or peers, and holds
no signing keys: `adder-collator` only builds blocks in memory and prints
them. Nothing is stored on disk.