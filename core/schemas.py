"""
core/schemas.py
───────────────
Modelos Pydantic que definem o contrato de dados do serviço de discovery.

Design Decisions
────────────────
1. Envelope de wire em camelCase:
   O DiscoveryRequest trafega com a chave ``requestType`` (contrato do
   worker externo). O campo Python é ``request_type`` com alias; o
   ``populate_by_name`` permite construir o modelo pelos dois nomes.

2. Credenciais opacas:
   ``DiscoveryContext.credentials`` é ``list[Any]``. O núcleo nunca
   inspeciona o conteúdo; apenas o repassa ao worker.

3. DiscoveryReply com dois formatos:
   Sucesso carrega ``result`` e erro carrega ``message``. ``to_dict()``
   omite o campo ausente para manter o envelope idêntico ao contrato.

4. Payloads da API (User/Credential/Discovery):
   Validados aqui para que os blueprints fiquem finos.
   ``ConfigDict(str_strip_whitespace=True)`` normaliza entradas de
   formulário/JSON com espaços extras.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from core.constants import (
    DISCOVERY_REQUEST_TYPE,
    SUPPORTED_CREDENTIAL_TYPES,
)


# ─── Contrato do pipeline ────────────────────────────────────────────────────

class DiscoveryContext(BaseModel):
    """Alvo, porta e credenciais de uma discovery."""

    ip: str = Field(
        ...,
        description="IP único (A.B.C.D) ou faixa no último octeto (A.B.C.X-Y).",
    )
    port: int = Field(..., description="Porta TCP do serviço a ser sondado.")
    credentials: list[Any] = Field(
        ...,
        description="Sequência opaca de credenciais repassada ao worker.",
    )


class DiscoveryRequest(BaseModel):
    """Request recebido pelo canal ``discovery``."""

    model_config = ConfigDict(populate_by_name=True)

    request_type: str = Field(
        default=DISCOVERY_REQUEST_TYPE,
        alias="requestType",
    )
    contexts: list[DiscoveryContext] = Field(default_factory=list)

    def to_json(self) -> str:
        """JSON compacto no formato de wire (``requestType``)."""
        return self.model_dump_json(by_alias=True)


class DiscoveryReply(BaseModel):
    """Envelope de resposta: sucesso com ``result`` ou erro com ``message``."""

    status: Literal["success", "error"]
    result: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, result: str) -> "DiscoveryReply":
        return cls(status="success", result=result)

    @classmethod
    def failure(cls, message: str) -> "DiscoveryReply":
        return cls(status="error", message=message)

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ─── Payloads da API ─────────────────────────────────────────────────────────

class UserCredentials(BaseModel):
    """Corpo de /users/register e /users/login."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(default="")
    password: str = Field(default="")


def _check_credential_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in SUPPORTED_CREDENTIAL_TYPES:
        raise ValueError(f"Unsupported credential type: {value}")
    return value


class CredentialCreate(BaseModel):
    """Cadastro de credencial: nome, tipo (SSH) e atributos livres."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    type: str
    attributes: dict[str, Any]

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: Optional[str]) -> Optional[str]:
        return _check_credential_type(value)


class CredentialUpdate(BaseModel):
    """Atualização parcial de credencial."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    attributes: Optional[dict[str, Any]] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: Optional[str]) -> Optional[str]:
        return _check_credential_type(value)


class DiscoveryCreate(BaseModel):
    """Cadastro de discovery persistida."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    ip: str = Field(..., min_length=1)
    port: int = Field(default=22)
    credential_ids: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("credential_ids", "credentialIDs"),
    )


class DiscoveryUpdate(BaseModel):
    """Atualização parcial de discovery persistida."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    ip: Optional[str] = Field(default=None, min_length=1)
    port: Optional[int] = None
    credential_ids: Optional[list[int]] = Field(
        default=None,
        validation_alias=AliasChoices("credential_ids", "credentialIDs"),
    )
