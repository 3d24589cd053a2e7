"""Live-update messages pushed to connected add-on runtimes."""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

MESSAGE_VERSION = 1


class AddOnAction(str, Enum):
    """What happened to the add-on. Version 1."""

    SOURCE_CODE_CHANGED = "SourceCodeChanged"


class SourceChangedPayload(BaseModel):
    """Details of a source change. Version 1.

    manifest is only set when the manifest was read and validated during the
    rebuild that produced this payload.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    changed_files: List[str] = Field(alias="changedFiles")
    is_build_successful: bool = Field(alias="isBuildSuccessful")
    is_manifest_changed: bool = Field(alias="isManifestChanged")
    manifest: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "changedFiles": list(self.changed_files),
            "isBuildSuccessful": self.is_build_successful,
            "isManifestChanged": self.is_manifest_changed,
        }
        if self.manifest is not None:
            data["manifest"] = self.manifest
        return data


class LiveUpdateMessage(BaseModel):
    """Message broadcast over the WebSocket channel when an add-on changes."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message_version: Literal[1] = Field(default=MESSAGE_VERSION, alias="messageVersion")
    id: str
    action: AddOnAction
    payload: SourceChangedPayload

    @classmethod
    def source_code_changed(
        cls,
        add_on_id: str,
        changed_files: List[str],
        is_build_successful: bool,
        is_manifest_changed: bool,
        manifest: Optional[Dict[str, Any]] = None,
    ) -> "LiveUpdateMessage":
        payload = SourceChangedPayload(
            changed_files=changed_files,
            is_build_successful=is_build_successful,
            is_manifest_changed=is_manifest_changed,
            manifest=manifest,
        )
        return cls(id=add_on_id, action=AddOnAction.SOURCE_CODE_CHANGED, payload=payload)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messageVersion": self.message_version,
            "id": self.id,
            "action": self.action.value,
            "payload": self.payload.to_dict(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


def parse_message(raw: str) -> Optional[LiveUpdateMessage]:
    """Parse a wire message, returning None for actions this version does not know.

    Raises:
        ValueError: If raw is not a JSON object of a known action with a valid payload
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Live-update message must be a JSON object")

    known_actions = {action.value for action in AddOnAction}
    if data.get("action") not in known_actions:
        logger.debug(f"Ignoring message with unknown action: {data.get('action')!r}")
        return None

    try:
        return LiveUpdateMessage.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid live-update message: {e}") from e
