"""Records exchanged with the remote response backend.

  - Person: the respondent (anonymous or identified by ``userId``)
  - Display: one recorded impression of a survey
  - ResponseRecord: a stored response as returned by the backend
  - ResponsePayload: what the player sends when creating/updating a response

Payloads are serialized with camelCase keys (``model_dump(by_alias=True)``)
to match the client API.
"""

from typing import Any, Dict, Optional

from survey_runtime.models.question import DocumentModel


class Person(DocumentModel):
    id: str
    user_id: Optional[str] = None


class Display(DocumentModel):
    id: str
    survey_id: Optional[str] = None


class ResponseRecord(DocumentModel):
    """A response as stored by the backend."""

    id: str
    data: Dict[str, Any] = {}
    finished: bool = False


class ResponseMeta(DocumentModel):
    # Page the respondent answered from
    url: str = ""


class ResponsePayload(DocumentModel):
    """Body of a create/update response call."""

    survey_id: str
    person_id: Optional[str] = None
    finished: bool
    data: Dict[str, Any]
    meta: ResponseMeta = ResponseMeta()
