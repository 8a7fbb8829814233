import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Union

from ..contracts.views import Slice


class StrictViewEncoder(json.JSONEncoder):
    """
    JSON Encoder for view models.

    RULES:
    1. Contract types serialize through their to_dict() (camelCase keys).
    2. Enums MUST use their .value.
    3. Tuples are lists; sets -> lists (sorted for determinism).
    4. Opaque example payloads are emitted as given.
    """

    def default(self, obj: Any) -> Any:
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        if hasattr(obj, "__dataclass_fields__"):
            from dataclasses import asdict
            return asdict(obj)

        return super().default(obj)


def to_json(obj: Any, indent: int = 2) -> str:
    """Serialize a view model; output is stable for identical input."""
    return json.dumps(obj, cls=StrictViewEncoder, indent=indent, ensure_ascii=False)


def export_slices_to_json(slices: Iterable[Slice]) -> str:
    """Slice export document: a JSON array of slices."""
    return to_json(list(slices))


_MODEL_SUFFIX = re.compile(r"\.json$", re.IGNORECASE)


def slices_output_path(model_path: Union[str, Path]) -> Path:
    """
    Default export location next to a model file.

    hotel.giraflow.json -> hotel.giraflow/slices.json
    """
    model_path = Path(model_path)
    folder = _MODEL_SUFFIX.sub("", model_path.name)
    if folder == model_path.name:
        folder = model_path.stem
    return model_path.parent / folder / "slices.json"
