"""
Deterministic random Bencodex values and fixture sets, to seed conformance
fixtures and property tests.
"""
import random
from pathlib import Path
from typing import Union

import yaml

from . import jsonrepr
from .encode import encode
from .types import Key, Value

ALPH = "abcdefghijklmnopqrstuvwxyz0123456789:-_ "
# pieces that look like markers or JSON/binary prefixes, plus multi-byte code points
TRICKY = ["\ufeff", "0x", "b64:", "u1:", "i0e", "e", "é", "한", "\U0001d11e"]


def rand_text(rng: random.Random, max_len: int = 24) -> str:
    parts = []
    for _ in range(rng.randint(0, max_len)):
        if rng.random() < 0.15:
            parts.append(rng.choice(TRICKY))
        else:
            parts.append(rng.choice(ALPH))
    return "".join(parts)


def rand_bytes(rng: random.Random, max_bytes: int = 16) -> bytes:
    return bytes(rng.getrandbits(8) for _ in range(rng.randint(0, max_bytes)))


def rand_int(rng: random.Random) -> int:
    bucket = rng.random()
    if bucket < 0.05:
        return -(1 << 63)
    if bucket < 0.10:
        return (1 << 63) - 1
    if bucket < 0.50:
        return rng.randint(-256, 256)
    if bucket < 0.80:
        return rng.randint(-(1 << 63), (1 << 63) - 1)
    # past any machine word
    n = rng.getrandbits(rng.randint(65, 512))
    return -n if rng.random() < 0.5 else n


def rand_key(rng: random.Random) -> Key:
    if rng.random() < 0.5:
        return rand_bytes(rng, 8)
    return rand_text(rng, 8)


def random_value(rng: random.Random, depth: int = 0, max_depth: int = 3) -> Value:
    if depth >= max_depth:
        choices = ["null", "bool", "int", "binary", "text"]
    else:
        choices = ["null", "bool", "int", "binary", "text", "list", "dict"]
    k = rng.choice(choices)
    if k == "null":
        return None
    if k == "bool":
        return bool(rng.getrandbits(1))
    if k == "int":
        return rand_int(rng)
    if k == "binary":
        return rand_bytes(rng)
    if k == "text":
        return rand_text(rng)
    if k == "list":
        return [random_value(rng, depth + 1, max_depth) for _ in range(rng.randint(0, 4))]
    if k == "dict":
        # insertion order is random; the encoder has to sort
        d = {rand_key(rng): random_value(rng, depth + 1, max_depth) for _ in range(rng.randint(0, 4))}
        texts = [key for key in d if isinstance(key, str)]
        if texts and rng.random() < 0.3:
            # binary twin of a text key: same bytes, distinct key
            d[rng.choice(texts).encode("utf-8")] = random_value(rng, depth + 1, max_depth)
        return d
    raise AssertionError("unreachable")


def write_fixtures(outdir: Union[str, Path], count: int = 128, seed: int = 1337) -> int:
    """Write ``count`` valid fixtures (.dat, .yaml, .json) under ``outdir/valid``."""
    rng = random.Random(seed)
    valid = Path(outdir) / "valid"
    valid.mkdir(parents=True, exist_ok=True)
    for i in range(count):
        v = random_value(rng)
        base = valid / f"generated_{seed}_{i:04d}"
        base.with_suffix(".dat").write_bytes(encode(v))
        with open(base.with_suffix(".yaml"), "w", encoding="utf-8") as f:
            yaml.safe_dump(v, f, allow_unicode=True, sort_keys=False)
        base.with_suffix(".json").write_text(jsonrepr.dumps(v, indent=2) + "\n", encoding="utf-8")
    return count
