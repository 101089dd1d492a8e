"""
Score maps: the per-parameter scores of one evaluation.

A score map is a plain dict from parameter id (int) to a numeric score. It is
stored in the evaluations table as JSON text. JSON object keys are always
strings, so decoding turns them back into ints; numbers are left as json
produced them, which keeps ints as ints and floats at full precision.
"""

import json
import math
import re
from typing import Dict, Mapping, Union

ParameterId = int
Score = Union[int, float]
ScoreMap = Dict[ParameterId, Score]

_PARAMETER_KEY = re.compile(r'-?[0-9]+')


def _parameter_id(key) -> ParameterId:
    if isinstance(key, bool):
        raise ValueError(f'Invalid parameter id: {key!r}')
    if isinstance(key, int):
        return key
    if isinstance(key, str) and _PARAMETER_KEY.fullmatch(key.strip()):
        return int(key)
    raise ValueError(f'Invalid parameter id: {key!r}')


def normalize_scores(raw: Mapping) -> ScoreMap:
    """Coerce a mapping from an outside source (JSON body, form) into a ScoreMap.

    Raises ValueError on non-numeric keys or values, NaN and infinities included.
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError('Scores must be an object of {parameter_id: score}')
    scores = {}
    for key, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f'Score for parameter {key} must be a number')
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f'Score for parameter {key} must be a finite number')
        scores[_parameter_id(key)] = value
    return scores


def encode_scores(scores: Mapping) -> str:
    return json.dumps({str(k): v for k, v in sorted(normalize_scores(scores).items())})


def decode_scores(text) -> ScoreMap:
    if not text:
        return {}
    return normalize_scores(json.loads(text))


def total_of(scores: Mapping) -> Score:
    return sum(scores.values())
