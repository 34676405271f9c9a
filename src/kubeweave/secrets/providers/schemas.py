"""
Value schemas for structured secrets.

Pydantic models describing what each Kubernetes Secret type expects from a
connector. `parse_secret_value` converts pydantic failures into the domain
ValidationError.
"""

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from kubeweave.shared.domain.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class BasicAuthValue(BaseModel):
    username: str
    password: str


class TlsValue(BaseModel):
    cert: str = Field(min_length=1)
    key: str = Field(min_length=1)


class SshAuthValue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ssh_privatekey: str = Field(alias="ssh-privatekey", min_length=1)
    known_hosts: str | None = None


class DockerRegistryValue(BaseModel):
    username: str
    password: str
    registry: str = Field(min_length=1)


def parse_secret_value(model: type[ModelT], value: Any, secret_name: str, provider: str) -> ModelT:
    """
    Validate a resolved value against a schema.

    Raises:
        ValidationError: Naming the secret, the provider and the failing fields
    """
    if not isinstance(value, dict):
        raise ValidationError(
            f"Invalid value for secret '{secret_name}' in {provider}: expected an object, got {type(value).__name__}",
            context={"secret": secret_name, "provider": provider},
        )
    try:
        return model.model_validate(value)
    except pydantic.ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ValidationError(
            f"Invalid value for secret '{secret_name}' in {provider}: {', '.join(fields)} {e.errors()[0]['msg'].lower()}",
            context={"secret": secret_name, "provider": provider, "fields": fields},
        ) from e
