from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.entities.flow import FlowAction, FlowScreen


class DecryptedFlowRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    action: str
    screen: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    flow_token: str | None = None
    version: str | None = None

    @field_validator("data", mode="before")
    @classmethod
    def null_data_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def flow_action(self) -> FlowAction | None:
        return FlowAction.parse(self.action)

    @property
    def flow_screen(self) -> FlowScreen | None:
        return FlowScreen.parse(self.screen)

    @property
    def is_error_notification(self) -> bool:
        return "error" in self.data
