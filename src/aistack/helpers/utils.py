import json
import os
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from botocore.exceptions import ClientError


def map_known_and_additional_fields(data_class, raw_data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Map known fields from a dataclass and capture additional fields dynamically.

    :param data_class: The dataclass to map fields to.
    :param raw_data: The raw input data (e.g., API response).
    :return: A tuple containing two dictionaries:
             - Known fields mapped to their values.
             - Additional properties not explicitly defined in the dataclass.
    """
    known_fields = {field.name for field in data_class.__dataclass_fields__.values()}
    known_data = {k: v for k, v in raw_data.items() if k in known_fields}
    additional_properties = {k: v for k, v in raw_data.items() if k not in known_fields}

    return known_data, additional_properties


def serialize_to_dict(obj: Any) -> Dict[str, Any]:
    """
    Serialize a dataclass object to a dictionary, including additional properties.

    :param obj: The dataclass object to serialize.
    :return: A dictionary representation of the object.
    """
    result = {}

    for field in fields(obj):
        if field.name == "additionalProperties":
            continue

        value = getattr(obj, field.name)

        # Skip None values
        if value is None:
            continue

        result[field.name] = _serialize_value(value)

    # Include additional properties if present
    additional = getattr(obj, "additionalProperties", None)
    if isinstance(additional, dict):
        result.update(additional)

    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value):
        return serialize_to_dict(value)
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize_value(val) for key, val in value.items()}
    return value


def paginate(client_method: Callable, result_key: str, **kwargs) -> List[Dict[str, Any]]:
    """
    Utility function to handle paginated responses from Boto3 client methods.

    :param client_method: The Boto3 client method to call (e.g., ec2_client.describe_route_tables).
    :param result_key: The key in the response that contains the desired results (e.g., "RouteTables").
    :param kwargs: Arguments to pass to the client method.
    :return: A list of items from all pages of the response.
    """
    paginator = client_method.__self__.get_paginator(client_method.__name__)
    results = []

    for page in paginator.paginate(**kwargs):
        results.extend(page.get(result_key, []))

    return results


def get_error_code(error: ClientError) -> str:
    """Return the AWS error code carried by a ClientError, or an empty string."""
    return error.response.get("Error", {}).get("Code", "")


def tags_to_dict(tags: Optional[List[Dict[str, str]]]) -> Dict[str, str]:
    """Convert an AWS ``[{"Key": ..., "Value": ...}]`` list into a plain dict."""
    return {tag["Key"]: tag["Value"] for tag in tags or []}


def dict_to_tags(tags: Optional[Dict[str, str]]) -> List[Dict[str, str]]:
    """Convert a plain dict into the AWS ``[{"Key": ..., "Value": ...}]`` list form."""
    return [{"Key": str(k), "Value": str(v)} for k, v in (tags or {}).items()]


def tag_specifications(resource_type: str, tags: Optional[Dict[str, str]]) -> List[Dict[str, Any]]:
    """
    Build an EC2 TagSpecifications list for a single resource type.

    :param resource_type: EC2 resource type (e.g. "vpc", "internet-gateway").
    :param tags: Tags to apply.
    :return: TagSpecifications, empty when there are no tags.
    """
    if not tags:
        return []
    return [{"ResourceType": resource_type, "Tags": dict_to_tags(tags)}]


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``override`` into a copy of ``base``.

    Nested dictionaries are merged key by key; any other value in ``override`` replaces
    the value in ``base``.
    """
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def ensure_directory_exists(path: str) -> None:
    """
    Ensure that a directory exists. If it does not exist, create it.

    Args:
        path (str): The directory path to check or create.
    """
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def load_json_data(json_str: str = None, json_file: str = None) -> Any:
    """
    Load JSON data from a string or file.

    Args:
        json_str (str): JSON string input.
        json_file (str): Path to a JSON file.

    Returns:
        Any: Parsed JSON data as a Python object.

    Raises:
        ValueError: If neither `json_str` nor `json_file` is provided.
    """
    if json_str:
        return json.loads(json_str)

    if json_file:
        with open(json_file, "r") as f:
            return json.load(f)

    raise ValueError("Either `json_str` or `json_file` must be provided.")
