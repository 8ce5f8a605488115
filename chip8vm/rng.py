"""Per-machine random byte source for CXNN."""

import secrets
from typing import Optional

import jax
import jax.numpy as jnp


def new_key(seed: Optional[int] = None) -> jax.Array:
    """Create an independent PRNG key, seeded from OS entropy when no seed is given."""
    if seed is None:
        seed = secrets.randbits(31)
    return jax.random.PRNGKey(seed)


def random_byte(key: jax.Array) -> tuple[jax.Array, int]:
    """Draw one uniformly distributed byte, returning the advanced key."""
    key, subkey = jax.random.split(key)
    value = jax.random.bits(subkey, shape=(), dtype=jnp.uint8)
    return key, int(value)
