"""Question type models for survey documents.

Each question type maps to a specific UI component and answer shape:

  - openText: free text input                          -> str
  - multipleChoiceSingle: pick one labelled choice     -> str (the label)
  - multipleChoiceMulti: pick one or more choices      -> list[str] (labels)
  - nps: 0-10 net promoter score                       -> number
  - rating: 1..range on a number/smiley/star scale     -> number
  - cta: call-to-action card                           -> "clicked" | "dismissed"
  - consent: consent checkbox                          -> "accepted" | "dismissed"
  - pictureSelection: pick one or more images          -> list[str] (choice ids)

Choice questions whose last choice has id ``"other"`` accept free text in
addition to the listed labels.

Documents use camelCase keys (``buttonLabel``, ``lowerLabel``...); the
models expose snake_case attributes and accept either spelling.

The discriminated ``Question`` union uses ``type`` as its discriminator.
The ``question_mapper`` dict maps type strings to their Pydantic classes.
"""

from __future__ import annotations

from typing import Annotated, ClassVar, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from survey_runtime.constants import OTHER_CHOICE_ID
from survey_runtime.models.i18n import LocalizedText
from survey_runtime.models.logic import LogicRule


class DocumentModel(BaseModel):
    """Base for models parsed from camelCase survey documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Shared choice models ---

class Choice(DocumentModel):
    """A selectable choice with an id and a localized label."""

    id: str
    label: LocalizedText


class PictureChoice(DocumentModel):
    """An image choice for pictureSelection questions."""

    id: str
    image_url: str


# --- Base question type ---

class BaseQuestion(DocumentModel):
    """Fields shared by all question types."""

    # Names of the LocalizedText fields on this type, used by translation
    # helpers.  Choice labels are handled separately.
    localized_fields: ClassVar[tuple[str, ...]] = (
        "headline", "subheader", "button_label", "back_button_label",
    )

    id: str
    headline: LocalizedText
    subheader: Optional[LocalizedText] = None
    required: bool = True
    logic: List[LogicRule] = []
    button_label: Optional[LocalizedText] = None
    back_button_label: Optional[LocalizedText] = None


class ChoiceQuestion(BaseQuestion):
    """Common behaviour of the two multiple-choice types."""

    localized_fields: ClassVar[tuple[str, ...]] = (
        BaseQuestion.localized_fields + ("other_option_placeholder",)
    )

    choices: List[Choice]
    other_option_placeholder: Optional[LocalizedText] = None

    @property
    def has_other(self) -> bool:
        """True if the last choice is the free-text "other" option."""
        return bool(self.choices) and self.choices[-1].id == OTHER_CHOICE_ID


# --- Concrete question types ---

class OpenTextQuestion(BaseQuestion):
    """Free text input."""

    localized_fields: ClassVar[tuple[str, ...]] = (
        BaseQuestion.localized_fields + ("placeholder",)
    )

    type: Literal["openText"] = "openText"
    placeholder: Optional[LocalizedText] = None


class MultipleChoiceSingleQuestion(ChoiceQuestion):
    """Pick exactly one choice."""

    type: Literal["multipleChoiceSingle"] = "multipleChoiceSingle"


class MultipleChoiceMultiQuestion(ChoiceQuestion):
    """Pick one or more choices."""

    type: Literal["multipleChoiceMulti"] = "multipleChoiceMulti"


class NPSQuestion(BaseQuestion):
    """Net promoter score on the fixed 0-10 scale."""

    localized_fields: ClassVar[tuple[str, ...]] = (
        BaseQuestion.localized_fields + ("lower_label", "upper_label")
    )

    type: Literal["nps"] = "nps"
    lower_label: Optional[LocalizedText] = None
    upper_label: Optional[LocalizedText] = None


class RatingQuestion(BaseQuestion):
    """Rating from 1 to ``range``."""

    localized_fields: ClassVar[tuple[str, ...]] = (
        BaseQuestion.localized_fields + ("lower_label", "upper_label")
    )

    type: Literal["rating"] = "rating"
    scale: Literal["number", "smiley", "star"] = "number"
    range: Literal[3, 4, 5, 7, 10] = 5
    lower_label: Optional[LocalizedText] = None
    upper_label: Optional[LocalizedText] = None


class CTAQuestion(BaseQuestion):
    """Call-to-action card, answered by clicking or dismissing."""

    localized_fields: ClassVar[tuple[str, ...]] = (
        BaseQuestion.localized_fields + ("html", "dismiss_button_label")
    )

    type: Literal["cta"] = "cta"
    html: Optional[LocalizedText] = None
    button_url: Optional[str] = None
    button_external: bool = False
    dismiss_button_label: Optional[LocalizedText] = None


class ConsentQuestion(BaseQuestion):
    """Consent checkbox, answered by accepting or dismissing."""

    localized_fields: ClassVar[tuple[str, ...]] = (
        BaseQuestion.localized_fields + ("html", "label")
    )

    type: Literal["consent"] = "consent"
    html: Optional[LocalizedText] = None
    label: Optional[LocalizedText] = None


class PictureSelectionQuestion(BaseQuestion):
    """Pick one (or, with ``allow_multi``, several) images."""

    type: Literal["pictureSelection"] = "pictureSelection"
    allow_multi: bool = False
    choices: List[PictureChoice]


# --- Discriminated union of all question types ---

Question = Annotated[
    Union[
        OpenTextQuestion,
        MultipleChoiceSingleQuestion,
        MultipleChoiceMultiQuestion,
        NPSQuestion,
        RatingQuestion,
        CTAQuestion,
        ConsentQuestion,
        PictureSelectionQuestion,
    ],
    Field(discriminator="type"),
]

# Maps type string -> Pydantic class for dynamic deserialization.
question_mapper = {
    "openText": OpenTextQuestion,
    "multipleChoiceSingle": MultipleChoiceSingleQuestion,
    "multipleChoiceMulti": MultipleChoiceMultiQuestion,
    "nps": NPSQuestion,
    "rating": RatingQuestion,
    "cta": CTAQuestion,
    "consent": ConsentQuestion,
    "pictureSelection": PictureSelectionQuestion,
}
