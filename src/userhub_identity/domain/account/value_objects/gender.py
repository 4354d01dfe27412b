from enum import Enum


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]
