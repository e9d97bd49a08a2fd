"""Project information form values and the choices offered for them."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from planquery.config import (
    ATTR_CLIENT,
    ATTR_DIVISION,
    ATTR_GARAGE_LOADING,
    ATTR_PLAN_NAME,
    ATTR_SPEC_LEVEL,
    ATTR_SUBDIVISION,
)
from planquery.host.base import ModelSource


class FormValidationError(ValueError):
    """Raised when required form fields are blank."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Required fields are blank: {', '.join(self.missing)}")


class FormOptions(BaseModel):
    """Selectable values for the drop-down fields.

    Free text outside these lists is still accepted.
    """

    spec_levels: list[str] = Field(
        default_factory=lambda: ["Standard", "Premium", "Luxury", "Custom"],
    )
    client_names: list[str] = Field(default_factory=list)
    client_divisions: list[str] = Field(default_factory=list)
    garage_loadings: list[str] = Field(default_factory=lambda: ["Front", "Side", "Rear"])

    @classmethod
    def load(cls, project_path: str | Path = ".") -> FormOptions:
        """Read ``.planquery/form_options.json``; defaults when absent."""
        path = Path(project_path) / ".planquery" / "form_options.json"
        if not path.is_file():
            return cls()
        return cls.model_validate(json.loads(path.read_text(encoding="utf-8")))


class ProjectInfoForm(BaseModel):
    plan_name: str = ""
    spec_level: str = ""
    client_name: str = ""
    client_division: str = ""
    client_subdivision: str = ""
    garage_loading: str = ""

    @classmethod
    def from_model(cls, model: ModelSource) -> ProjectInfoForm:
        """Prefill from the attributes already stored in *model*."""
        return cls(**{
            field: model.get_attribute(attr) or ""
            for field, (attr, _) in _FIELD_ATTRIBUTES.items()
        })

    def missing_fields(self) -> list[str]:
        return [
            attr
            for field, (attr, required) in _FIELD_ATTRIBUTES.items()
            if required and not getattr(self, field).strip()
        ]

    def validate_required(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise FormValidationError(missing)

    def unlisted_values(self, options: FormOptions) -> list[str]:
        """Attribute names whose value is not one of the offered choices.

        Fields whose choice list is empty accept anything.
        """
        choices = {
            "spec_level": options.spec_levels,
            "client_name": options.client_names,
            "client_division": options.client_divisions,
            "garage_loading": options.garage_loadings,
        }
        unlisted: list[str] = []
        for field, allowed in choices.items():
            value = getattr(self, field).strip()
            if value and allowed and value not in allowed:
                unlisted.append(_FIELD_ATTRIBUTES[field][0])
        return unlisted

    def attribute_values(self) -> dict[str, str]:
        """Model attribute name -> trimmed value."""
        return {
            attr: getattr(self, field).strip()
            for field, (attr, _) in _FIELD_ATTRIBUTES.items()
        }


# form field -> (model attribute, required)
_FIELD_ATTRIBUTES: dict[str, tuple[str, bool]] = {
    "plan_name": (ATTR_PLAN_NAME, True),
    "spec_level": (ATTR_SPEC_LEVEL, True),
    "client_name": (ATTR_CLIENT, True),
    "client_division": (ATTR_DIVISION, True),
    "client_subdivision": (ATTR_SUBDIVISION, True),
    "garage_loading": (ATTR_GARAGE_LOADING, False),
}
