from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict


class BaseModel(PydanticBaseModel):
    """
    Changing default pydantic configuration to suit our needs for handling
    the payloads of the OCPP messages
    """

    model_config = ConfigDict(
        # Allow input by alias (the camelCase wire name) or field name in
        # Python code. JSONCodec reads trees by alias only
        populate_by_name=True,
        # Unknown keys on the wire are dropped instead of failing the parse,
        # so that newer peers can talk to us. Vendor specific data has its
        # own channel (see CustomData)
        extra="ignore",
        # Messages are value objects, nothing changes after construction
        frozen=True,
    )
