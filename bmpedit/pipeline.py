"""Operation specifications and JSON pipeline files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .codec import BmpImage
from .convolution import FilterKind, apply_named_filter
from .equalize import equalize
from .errors import InvalidParameterError
from .operators import brightness, grayscale, negative, threshold

logger = logging.getLogger(__name__)

VALUE_OPERATIONS = ("brightness", "threshold")
PLAIN_OPERATIONS = ("negative", "grayscale", "equalize") + tuple(
    kind.value for kind in FilterKind
)
OPERATION_NAMES = VALUE_OPERATIONS + PLAIN_OPERATIONS


@dataclass(frozen=True)
class Operation:
    """A single named transform and its optional integer argument."""

    name: str
    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.name not in OPERATION_NAMES:
            raise InvalidParameterError(
                f"Unknown operation {self.name!r} (expected one of: {', '.join(OPERATION_NAMES)})"
            )
        if self.name in VALUE_OPERATIONS and self.value is None:
            raise InvalidParameterError(f"Operation {self.name!r} requires an integer value")
        if self.name in PLAIN_OPERATIONS and self.value is not None:
            raise InvalidParameterError(f"Operation {self.name!r} takes no value")

    def __str__(self) -> str:
        return self.name if self.value is None else f"{self.name}={self.value}"


def _to_int(name: str, raw: object) -> int:
    # floats and booleans are not integer arguments
    if isinstance(raw, (bool, float)):
        raise InvalidParameterError(f"Invalid value for {name!r}: {raw!r}")
    try:
        return int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidParameterError(f"Invalid value for {name!r}: {raw!r}") from None


def parse_operation(text: str) -> Operation:
    """Parse ``"negative"`` or ``"brightness=-20"`` style specifications."""

    name, sep, raw = text.strip().partition("=")
    name = name.strip().lower()
    if not sep:
        return Operation(name)
    return Operation(name, _to_int(name, raw.strip()))


def operation_from_json(entry: Union[str, dict]) -> Operation:
    if isinstance(entry, str):
        return parse_operation(entry)
    if isinstance(entry, dict) and "op" in entry:
        name = str(entry["op"]).lower()
        value = entry.get("value")
        return Operation(name, None if value is None else _to_int(name, value))
    raise InvalidParameterError(f"Invalid pipeline entry: {entry!r}")


def load_pipeline(path: Path | None) -> List[Operation]:
    """Read a JSON list of operations, e.g. ``["negative", {"op": "brightness", "value": 10}]``."""

    if path is None:
        return []
    with Path(path).open("r", encoding="utf-8") as fp:
        data = json.load(fp)
    if not isinstance(data, list):
        raise InvalidParameterError(f"Pipeline file {path} must contain a JSON list")
    return [operation_from_json(entry) for entry in data]


def apply_operation(image: BmpImage, operation: Operation) -> BmpImage:
    name = operation.name
    if name == "negative":
        negative(image)
    elif name == "brightness":
        brightness(image, operation.value)
    elif name == "threshold":
        threshold(image, operation.value)
    elif name == "grayscale":
        grayscale(image)
    elif name == "equalize":
        equalize(image)
    else:
        apply_named_filter(image, FilterKind(name))
    logger.info("Applied %s", operation)
    return image


def run_pipeline(image: BmpImage, operations: Iterable[Operation]) -> BmpImage:
    for operation in operations:
        apply_operation(image, operation)
    return image
