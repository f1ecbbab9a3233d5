from enum import IntEnum


class ParsableEnum(IntEnum):
    """IntEnum that parses names case-insensitively, or integer values"""

    @classmethod
    def parse(cls, value):
        """
        Parse a member from its name (any case), its integer value, or a member.

        Raises:
            ValueError: if the value does not name a member
        """
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError(f"{cls.__name__} is required")
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        text = str(value).strip()
        for member in cls:
            if member.name.lower() == text.lower():
                return member
        if text.lstrip('-').isdigit():
            return cls(int(text))
        raise ValueError(f"Invalid {cls.__name__} '{value}'. Valid values: {cls.valid_values()}")

    @classmethod
    def try_parse(cls, value):
        try:
            return cls.parse(value)
        except ValueError:
            return None

    @classmethod
    def valid_values(cls):
        return ', '.join(member.name for member in cls)


class AssetStatus(ParsableEnum):
    InGebruik = 0
    Stock = 1
    Herstelling = 2
    Defect = 3
    UitDienst = 4


class AssetEventType(ParsableEnum):
    Created = 0
    StatusChanged = 1
    OwnerChanged = 2
    LocationChanged = 3
    LeaseStarted = 4
    LeaseEnded = 5
    Maintenance = 6
    Note = 7
    Other = 99


class LeaseStatus(ParsableEnum):
    Active = 0
    Expiring = 1
    Expired = 2
    Terminated = 3
    Renewed = 4
