"""
Response Normalizer

The model is asked for bare JSON but often wraps it in markdown fences or
adds commentary. The payload is taken as everything between the first "{"
and the last "}"; braces inside a leading comment will break this.
"""

import json
import logging
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from analytics_ai.errors import ResultParseError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def clean_json_response(response: str) -> str:
    """Strip backticks/markdown fences and cut out the candidate JSON object"""
    response = response.replace("`", "")
    response = response.replace("```json", "")
    response = response.replace("```", "")

    start = response.find("{")
    end = response.rfind("}")

    if start >= 0 and end > start:
        return response[start:end + 1]

    return response


def parse_result(response: str, model: Type[T]) -> T:
    """Clean the reply and decode it into the given result model"""
    payload = clean_json_response(response)
    try:
        data = json.loads(payload)
        return model.model_validate(data)
    except (ValueError, ValidationError) as e:
        logger.warning("Could not parse %s from model reply: %s", model.__name__, payload)
        raise ResultParseError(e, payload) from e
