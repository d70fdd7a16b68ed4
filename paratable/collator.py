"""Collator for the adder parachain: produces new blocks on top of a given head."""

from __future__ import annotations

import argparse
import threading
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from paratable import adder
from paratable.adder import BlockData, HeadData

GENESIS = HeadData(
    number=0,
    parent_hash=bytes(32),
    post_state=bytes(
        [
            1, 27, 77, 3, 221, 140, 1, 241, 4, 145, 67, 207, 156, 76, 129, 126,
            75, 22, 127, 29, 27, 131, 229, 198, 240, 241, 13, 137, 186, 30, 123, 206,
        ]
    ),
)

GENESIS_BODY = BlockData(state=0, add=0)

PARA_ID = 100

_U64_MASK = (1 << 64) - 1


class InvalidHead(Exception):
    """The head handed to the collator could not be decoded."""


class AdderCollator:
    """Produces candidates for the adder parachain, remembering every body it made."""

    def __init__(self) -> None:
        self._bodies: Dict[HeadData, BlockData] = {}
        self._lock = threading.Lock()

    def produce_candidate(
        self, last_head: bytes, ingress: Iterable[Tuple[int, Any]] = ()
    ) -> Tuple[bytes, bytes]:
        """Build the next block on top of the encoded ``last_head``.

        Returns the encoded block body and the encoded new head.
        """
        try:
            head = HeadData.decode(last_head)
        except ValueError as exc:
            raise InvalidHead(str(exc)) from exc

        with self._lock:
            if head == GENESIS:
                last_body = GENESIS_BODY
            else:
                last_body = self._bodies.get(head)
                if last_body is None:
                    raise RuntimeError(
                        "no stored body for head; all past bodies are kept by this collator"
                    )

            next_body = BlockData(
                state=(last_body.state + last_body.add) & _U64_MASK,
                add=head.number % 100,
            )
            next_head = adder.execute(head.hash(), head, next_body)

            post_state = (next_body.state + next_body.add) & _U64_MASK
            print(f"Created collation for #{next_head.number}, post-state={post_state}")

            self._bodies[next_head] = next_body
            return next_body.encode(), next_head.encode()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the genesis head and produce a chain of collations locally."""
    parser = argparse.ArgumentParser(
        prog="adder-collator", description="collator for adder parachain"
    )
    parser.add_argument(
        "--blocks",
        type=int,
        default=0,
        help="number of collations to produce on top of genesis",
    )
    args = parser.parse_args(argv)

    print("Starting adder collator with genesis: ")
    encoded = GENESIS.encode()
    print(f"Dec: {list(encoded)}")
    print(f"Hex: 0x{encoded.hex()}")

    collator = AdderCollator()
    head = encoded
    try:
        for _ in range(args.blocks):
            _, head = collator.produce_candidate(head, ())
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())