from __future__ import annotations

import hashlib
import logging
import random
import secrets
from dataclasses import dataclass, field
from typing import Union

logger = logging.getLogger(__name__)

SeedLike = Union[int, str, bytes, None]

# Each generation stage draws from its own stream, so changing how one stage
# consumes randomness never reshuffles another.
CARVE_DOMAIN = "maze_carve"
EXIT_DOMAIN = "exit_placement"
SPAWN_DOMAIN = "spawn_plan"

_PERSON = b"ghostmaze-v1"
_RANDOM_SEED_BYTES = 16


def seed_to_bytes(seed: SeedLike) -> bytes:
    """Canonical byte form of a master seed.

    Ints are big-endian (negative values get a ``-`` prefix so 5 and -5 differ),
    strings are UTF-8 after stripping surrounding whitespace, bytes pass through.
    ``None`` draws fresh random bytes.
    """
    if seed is None:
        return secrets.token_bytes(_RANDOM_SEED_BYTES)
    if isinstance(seed, bool):
        raise TypeError(f"Unsupported seed type: {type(seed).__name__}")
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, int):
        sign, magnitude = (b"-", -seed) if seed < 0 else (b"", seed)
        return sign + magnitude.to_bytes((magnitude.bit_length() + 7) // 8 or 1, "big")
    if isinstance(seed, str):
        return seed.strip().encode("utf-8")
    raise TypeError(f"Unsupported seed type: {type(seed).__name__}")


@dataclass(frozen=True)
class RNGManager:
    """Per-stage random streams derived from one master seed.

    A level is reproducible from ``(seed, width, height)``: every stage asks for
    ``context_rng(domain, width, height)`` and gets the same ``random.Random``
    no matter which other stages ran before it.

    Usage:
        rngm = RNGManager(seed)
        carve_rng = rngm.context_rng(CARVE_DOMAIN, width, height)
    """

    master_seed: SeedLike
    _key: bytes = field(init=False, repr=False, compare=False)
    _master: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        master = seed_to_bytes(self.master_seed)
        object.__setattr__(self, "_master", master)
        # BLAKE2b keys are capped at 64 bytes, so arbitrary-length seeds are folded first
        object.__setattr__(self, "_key", hashlib.blake2b(master, digest_size=32).digest())
        if self.master_seed is None:
            logger.info("No master seed provided; generated random seed: %s", master.hex())

    def derive_seed(self, domain: str, *identifiers: object) -> int:
        """64-bit seed for ``domain`` and the given identifiers (usually level dimensions)."""
        message = "\x1f".join([domain, *(repr(i) for i in identifiers)]).encode("utf-8")
        digest = hashlib.blake2b(message, digest_size=8, key=self._key, person=_PERSON).digest()
        value = int.from_bytes(digest, "big")
        logger.debug("Derived seed for %s%s -> %d", domain, identifiers, value)
        return value

    def context_rng(self, domain: str, *identifiers: object) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))

    def get_master_seed_hex(self) -> str:
        """Hex of the canonical master seed; ``bytes.fromhex`` of it rebuilds the same streams."""
        return self._master.hex()
