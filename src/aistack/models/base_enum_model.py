from enum import Enum


class BaseEnumModel(Enum):
    """
    Enum whose members serialise to their string value, e.g. ``ResourceType.VPC`` <-> ``"vpc"``.
    """

    @classmethod
    def from_dict(cls, value):
        """
        Parse a member from its value ("release-failed") or its name ("RELEASE_FAILED").

        :raises ValueError: If the value matches no member.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value == member.value or value.upper() == member.name:
                    return member
        raise ValueError(f"'{value}' is not a valid {cls.__name__}")

    def to_dict(self):
        return self.value

    def __str__(self):
        return self.value
