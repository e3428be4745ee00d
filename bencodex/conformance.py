"""Conformance fixture runner.

A fixture root holds two directories::

    valid/<name>.dat      canonical encoding; must decode and re-encode to
                          identical bytes
    valid/<name>.yaml     optional: the same value in YAML (!!binary for
                          byte strings), loaded with yaml.safe_load
    valid/<name>.json     optional: the same value in the JSON representation
    invalid/<name>.dat    must be rejected

An invalid fixture named ``<ErrorClass>-<anything>.dat`` must be rejected
with that particular error class.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import yaml

from . import errors, jsonrepr
from .decode import decode
from .encode import encode
from .errors import BencodexError
from .types import Value, equal

log = logging.getLogger(__name__)


@dataclass
class Failure:
    name: str
    reason: str


@dataclass
class Report:
    ok: int = 0
    failures: List[Failure] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return f"Summary: {self.ok} ok, {len(self.failures)} failed"


def load_yaml(path: Path) -> Value:
    with open(path, "rb") as f:
        return yaml.safe_load(f)


def _matches(expected, value: Value) -> bool:
    try:
        return equal(expected, value)
    except BencodexError:
        # YAML can hold kinds Bencodex lacks, such as floats
        return False


def check_valid(path: Path) -> Optional[str]:
    """Return why the valid fixture at ``path`` fails, or ``None``."""
    data = path.read_bytes()
    try:
        value = decode(data, strict=True)
    except BencodexError as e:
        return f"valid fixture rejected: {type(e).__name__}: {e}"
    if encode(value) != data:
        return "re-encode mismatch"

    yaml_path = path.with_suffix(".yaml")
    if yaml_path.exists():
        try:
            expected = load_yaml(yaml_path)
        except yaml.YAMLError as e:
            return f"unreadable YAML: {e}"
        if not _matches(expected, value):
            return "decoded value differs from the YAML representation"

    json_path = path.with_suffix(".json")
    if json_path.exists():
        try:
            expected = jsonrepr.loads(json_path.read_text(encoding="utf-8"))
        except BencodexError as e:
            return f"unreadable JSON representation: {type(e).__name__}: {e}"
        if not equal(expected, value):
            return "decoded value differs from the JSON representation"
    return None


def expected_error(path: Path):
    name = path.stem.partition("-")[0]
    cls = getattr(errors, name, None)
    if isinstance(cls, type) and issubclass(cls, BencodexError):
        return cls
    return BencodexError


def check_invalid(path: Path) -> Optional[str]:
    """Return why the invalid fixture at ``path`` fails, or ``None``."""
    want = expected_error(path)
    try:
        decode(path.read_bytes(), strict=True)
    except want as e:
        log.debug("%s rejected: %s: %s", path.name, type(e).__name__, e)
        return None
    except BencodexError as e:
        return f"rejected with {type(e).__name__}, expected {want.__name__}"
    return "invalid fixture accepted"


def run_fixtures(root: Union[str, Path]) -> Report:
    """Check every fixture under ``root``.

    Raises :class:`FileNotFoundError` when ``root`` holds neither a
    ``valid/`` nor an ``invalid/`` directory.
    """
    root = Path(root)
    cases = [("valid", check_valid), ("invalid", check_invalid)]
    if not any((root / sub).is_dir() for sub, _ in cases):
        raise FileNotFoundError(f"no valid/ or invalid/ fixture directory under {root}")
    report = Report()
    for sub, check in cases:
        for path in sorted((root / sub).glob("*.dat")):
            name = f"{sub}/{path.name}"
            reason = check(path)
            if reason is None:
                log.debug("ok %s", name)
                report.ok += 1
            else:
                log.warning("FAIL %s: %s", name, reason)
                report.failures.append(Failure(name, reason))
    return report
