from dataclasses import fields
from typing import Any, Dict

from aistack.helpers.utils import map_known_and_additional_fields, serialize_to_dict
from aistack.models.base_enum_model import BaseEnumModel


class BaseModel:
    """
    Base class for dataclass models. Provides common methods like get_property, to_dict, and from_dict.

    Subclasses are dataclasses declaring an ``additionalProperties`` field.
    """

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseModel":
        """
        Create a model object from a dictionary, as produced by ``to_dict``.

        Enum fields accept their serialised string values; unknown keys land in additionalProperties.

        :param data: Dictionary containing model values.
        :return: A model object.
        """
        known_data, additional_properties = map_known_and_additional_fields(cls, data)

        for model_field in fields(cls):
            field_type = model_field.type
            if model_field.name in known_data and isinstance(field_type, type) and issubclass(field_type, BaseEnumModel):
                known_data[model_field.name] = field_type.from_dict(known_data[model_field.name])

        obj = cls(**known_data)
        obj.additionalProperties.update(additional_properties)
        return obj

    def to_dict(self) -> Dict[str, Any]:
        return serialize_to_dict(self)

    def get_property(self, property_name: str) -> Any:
        """
        Get a property value from either the dataclass fields or additionalProperties.

        :param property_name: The name of the property to retrieve.
        :return: The value of the property or None if not found.
        """
        value = getattr(self, property_name, None)
        if value is None:
            value = self.additionalProperties.get(property_name)
        return value
