"""Localized text models.

Survey documents store every user-visible string either as a plain string
(legacy single-language surveys) or as a language map
``{"default": "...", "de": "..."}``.  Both forms are accepted on input and
turned into a tagged union so the rest of the SDK never has to inspect the
raw shape:

  - PlainText: a single string, language-independent
  - LocalizedMap: language code -> string

Strings are only ever read through :mod:`survey_runtime.i18n`.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, BeforeValidator, Field

# Marker key some platform versions add to language maps.  It carries no
# text and is dropped on input.
I18N_SENTINEL_KEY = "_i18n_"


class PlainText(BaseModel):
    """A legacy single-language string."""

    kind: Literal["plain"] = "plain"
    text: str


class LocalizedMap(BaseModel):
    """A string translated into one or more languages."""

    kind: Literal["localized"] = "localized"
    translations: Dict[str, str] = {}


def coerce_localized(value: Any) -> Any:
    """Turn a raw document value into the input of the tagged union.

    Plain strings become ``PlainText``; dicts without a ``kind`` key are
    treated as language maps (the sentinel key is stripped).  Anything
    else is passed through for pydantic to accept or reject.
    """
    if isinstance(value, (PlainText, LocalizedMap)):
        return value
    if isinstance(value, str):
        return {"kind": "plain", "text": value}
    if isinstance(value, dict) and "kind" not in value:
        translations = {
            k: v for k, v in value.items()
            if k != I18N_SENTINEL_KEY and isinstance(v, str)
        }
        return {"kind": "localized", "translations": translations}
    return value


# Discriminated union: Pydantic picks the variant from the "kind" field.
LocalizedText = Annotated[
    Union[PlainText, LocalizedMap],
    Field(discriminator="kind"),
    BeforeValidator(coerce_localized),
]
