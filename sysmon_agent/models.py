import json

from pydantic import BaseModel, ConfigDict, Field


class Sample(BaseModel):
    """One observation, serialized with the field names the receiver expects."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_address: str = Field(alias="clientIP")
    cpu_percent: float = Field(default=0.0, alias="cpuUsage")
    memory_percent: float = Field(default=0.0, alias="memoryUsage")
    disk_percent: float = Field(default=0.0, alias="diskUsage")

    def to_json(self) -> str:
        # compact body, NaN/inf rejected with ValueError
        return json.dumps(
            self.model_dump(by_alias=True),
            separators=(",", ":"),
            allow_nan=False,
        )

    @classmethod
    def from_json(cls, text: str) -> "Sample":
        return cls.model_validate(json.loads(text))
