from pydantic import BaseModel, Field


class EncryptedFlowRequestSchema(BaseModel):
    encrypted_flow_data: str = Field(min_length=1)
    encrypted_aes_key: str = Field(min_length=1)
    initial_vector: str = Field(min_length=1)


class FlowEndpointStatusSchema(BaseModel):
    status: str
    message: str


class FlowKeysSchema(BaseModel):
    configured: bool
    public_key: str | None = None


class ErrorSchema(BaseModel):
    error: str
    hint: str | None = None
