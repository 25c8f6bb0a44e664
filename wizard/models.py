"""
Pydantic models for bulb parameters and state
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

from .errors import ProtocolError, ProtocolFailure


class Params(BaseModel):
    """
    Parameter set of a setPilot request.

    The field set is closed: only keys the bulb understands can be set, and
    values are range checked before anything goes on the wire.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    state: Optional[StrictBool] = None
    scene_id: Optional[StrictInt] = Field(None, alias="sceneId", ge=0)
    r: Optional[StrictInt] = Field(None, ge=0, le=255)
    g: Optional[StrictInt] = Field(None, ge=0, le=255)
    b: Optional[StrictInt] = Field(None, ge=0, le=255)
    speed: Optional[StrictInt] = Field(None, ge=0)
    temp: Optional[StrictInt] = Field(None, ge=0)
    dimming: Optional[StrictInt] = Field(None, ge=0, le=100)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "Params":
        """Build a parameter set from params echoed by the bulb, dropping unknown keys"""
        known = {field.alias or name for name, field in cls.model_fields.items()}
        try:
            return cls.model_validate({k: v for k, v in data.items() if k in known})
        except ValidationError as e:
            raise ProtocolError(ProtocolFailure.INVALID_FIELD,
                                f"bulb echoed invalid params: {e.errors()}")

    def to_wire(self) -> Dict[str, Any]:
        """Wire form containing only the keys that were set"""
        return self.model_dump(by_alias=True, exclude_none=True)

    def is_empty(self) -> bool:
        return not self.to_wire()


class Configuration(BaseModel):
    """
    Snapshot of a bulb's state as reported by getPilot.

    The bulb only reports what applies to its current mode (a scene has no
    r/g/b, a white mode has no sceneId), so every field is optional and None
    means "not applicable", never zero or off.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    power: Optional[bool] = Field(None, alias="state")
    scene_id: Optional[int] = Field(None, alias="sceneId")
    red: Optional[int] = Field(None, alias="r")
    green: Optional[int] = Field(None, alias="g")
    blue: Optional[int] = Field(None, alias="b")
    speed: Optional[int] = Field(None, alias="speed")
    color_temp: Optional[int] = Field(None, alias="temp")
    brightness: Optional[int] = Field(None, alias="dimming")

    @classmethod
    def from_status_result(cls, result: Mapping[str, Any]) -> "Configuration":
        """
        Build a snapshot from the `result` object of a getPilot reply

        Args:
            result: Decoded result object

        Returns:
            Configuration with absent keys left as None

        Raises:
            ProtocolError: If a known key carries a value of the wrong type
        """
        try:
            return cls.model_validate(dict(result))
        except ValidationError as e:
            raise ProtocolError(ProtocolFailure.INVALID_FIELD,
                                f"unexpected value in status result: {e.errors()}")

    def merge(self, update: Params) -> "Configuration":
        """Return a copy with every field present in `update` overwritten"""
        wire_to_field = {field.alias: name for name, field in type(self).model_fields.items()}
        changes = {wire_to_field[key]: value for key, value in update.to_wire().items()}
        return self.model_copy(update=changes)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
