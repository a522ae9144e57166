from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..catalog.model import ClassRef
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a user known to the reporting layer.

    Note: Plain data object; students carry their class assignment.
    """

    user_id: str
    full_name: str
    email: Optional[str]
    role: Role
    class_ref: Optional[ClassRef] = None

    @property
    def class_id(self) -> Optional[str]:
        return self.class_ref.class_id if self.class_ref else None

    @property
    def display_name(self) -> str:
        if self.full_name and self.full_name.strip():
            return self.full_name
        return self.email or self.user_id
