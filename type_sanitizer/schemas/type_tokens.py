"""
Type tokens understood by the filter catalog, and annotation markers
that let value types declare tokens Python has no native type for.
"""
from dataclasses import dataclass
from typing import Annotated, Final, List

STRING: Final = "string"
BOOL: Final = "bool"
INT: Final = "int"
FLOAT: Final = "float"
PHONE_NUMBER: Final = "phoneNumber"
INT_ARRAY: Final = "int[]"


@dataclass(frozen=True)
class TypeToken:
    """
    Annotation marker overriding the token inferred from a field's type.

    Example:
        class Contact(BaseModel):
            phone: Annotated[Optional[str], TypeToken("phoneNumber")] = None
    """
    name: str


PhoneNumber = Annotated[str, TypeToken(PHONE_NUMBER)]
IntList = Annotated[List[int], TypeToken(INT_ARRAY)]
