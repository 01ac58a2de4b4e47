#!/usr/bin/env python3
"""Data models for the Api3 aggregator adapter.

This module provides immutable data classes for the feed readings pulled
from an Api3 proxy, the round data synthesized from them, and the outcome
of a deterministic deployment.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class FeedReading:
    """A single reading of an Api3 proxy.

    Readings are fetched fresh on every adapter query and never cached.

    Attributes:
        value: Signed data feed value, as reported by the proxy
        timestamp: Unix timestamp of the last data feed update
    """

    value: int
    timestamp: int


@dataclass(frozen=True, slots=True)
class RoundData:
    """Round data in the shape of the legacy aggregator interface.

    Unpacks like the 5-tuple returned by `latestRoundData()` on-chain:

        round_id, answer, started_at, updated_at, answered_in_round = data

    Attributes:
        round_id: Block number the round was synthesized from
        answer: Data feed value
        started_at: Data feed timestamp
        updated_at: Data feed timestamp
        answered_in_round: Same as round_id
    """

    round_id: int
    answer: int
    started_at: int
    updated_at: int
    answered_in_round: int

    @classmethod
    def from_reading(cls, round_id: int, reading: FeedReading) -> "RoundData":
        """Approximate round data for `round_id` from a proxy reading."""
        return cls(
            round_id=round_id,
            answer=reading.value,
            started_at=reading.timestamp,
            updated_at=reading.timestamp,
            answered_in_round=round_id
        )

    def __iter__(self) -> Iterator[int]:
        return iter((
            self.round_id,
            self.answer,
            self.started_at,
            self.updated_at,
            self.answered_in_round
        ))

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary keyed by the legacy ABI output names."""
        return {
            "roundId": self.round_id,
            "answer": self.answer,
            "startedAt": self.started_at,
            "updatedAt": self.updated_at,
            "answeredInRound": self.answered_in_round
        }


@dataclass(frozen=True, slots=True)
class DeploymentResult:
    """Outcome of a deterministic adapter deployment.

    Attributes:
        proxy_address: Api3 proxy the adapter wraps
        adapter_address: CREATE2 address of the adapter
        network: Name of the network the deployment was checked against
        deployed: False if the adapter was already deployed (no transaction sent)
        transaction_hash: Hash of the deployment transaction, if one was sent
    """

    proxy_address: str
    adapter_address: str
    network: str
    deployed: bool
    transaction_hash: str | None = None

    def __str__(self) -> str:
        """Human-readable string representation."""
        if self.deployed:
            return (
                f"Api3PartialAggregatorV2V3Interface for {self.proxy_address} "
                f"is deployed at {self.adapter_address} of {self.network}"
            )
        return (
            f"Api3PartialAggregatorV2V3Interface for {self.proxy_address} "
            f"was already deployed at {self.adapter_address} of {self.network}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "proxy_address": self.proxy_address,
            "adapter_address": self.adapter_address,
            "network": self.network,
            "deployed": self.deployed,
            "transaction_hash": self.transaction_hash
        }
