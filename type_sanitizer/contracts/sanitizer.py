"""
Public sanitizer contract.
"""
from typing import Any, Protocol, Union, runtime_checkable

from type_sanitizer.services.failure_policy import FailurePolicy


@runtime_checkable
class Sanitizer(Protocol):
    """Anything that sanitizes data against a field specification."""

    def sanitize(
        self,
        data: Any,
        specification: Any,
        failure_policy: Union[FailurePolicy, str, None] = None,
    ) -> Any:
        ...
