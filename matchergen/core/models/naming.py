"""
NamingDecision — where a generated matcher lives and what it is called.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

SOURCE_EXTENSION = ".py"


class NamingDecision(BaseModel):
    """Target package and type name for one candidate's matcher.

    Attributes:
        package:   Dotted target package; empty for the default package.
        type_name: Name of the generated class (and of its module file).
    """

    model_config = ConfigDict(frozen=True)

    package: str = ""
    type_name: str

    @property
    def module_name(self) -> str:
        """Dotted name the generated module is loaded under."""
        if self.package:
            return f"{self.package}.{self.type_name}"
        return self.type_name

    @property
    def relative_path(self) -> Path:
        """Output path relative to the output root."""
        parts = self.package.split(".") if self.package else []
        return Path(*parts, f"{self.type_name}{SOURCE_EXTENSION}")
