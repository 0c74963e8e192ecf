"""
Typed RPC layer speaking the tRPC HTTP wire format.

Procedures are registered on an RpcRouter as either queries (side-effect
free, called with GET) or mutations (called with POST). Each declares a
pydantic input model; raw input is validated before the handler runs, and
handler errors are translated into tRPC error envelopes here and nowhere else.

Wire format (no transformer):
- GET  /trpc/<name>?input=<json>          -> {"result": {"data": <output>}}
- POST /trpc/<name>   body: <json>        -> {"result": {"data": "OK"}}
- batch: /trpc/<a>,<b>?batch=1, inputs keyed by position {"0": ..., "1": ...},
  response is a JSON array of envelopes.
"""
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from domain import Domain
from services.exceptions import NotFoundError, UnauthenticatedError

logger = logging.getLogger(__name__)

# Returned by every successful mutation instead of the mutated record
SUCCESS = "OK"


class ProcedureType(StrEnum):
    """Kind of procedure, which also fixes the HTTP method it accepts."""

    QUERY = "query"
    MUTATION = "mutation"


class RpcErrorCode(StrEnum):
    """tRPC error codes used by this API."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_SUPPORTED = "METHOD_NOT_SUPPORTED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


# code -> (JSON-RPC numeric code, HTTP status)
ERROR_CODES: dict[RpcErrorCode, tuple[int, int]] = {
    RpcErrorCode.BAD_REQUEST: (-32600, 400),
    RpcErrorCode.UNAUTHORIZED: (-32001, 401),
    RpcErrorCode.NOT_FOUND: (-32004, 404),
    RpcErrorCode.METHOD_NOT_SUPPORTED: (-32005, 405),
    RpcErrorCode.INTERNAL_SERVER_ERROR: (-32603, 500),
}


class RpcError(Exception):
    """An error with a tRPC code, ready to be sent to the client."""

    def __init__(self, code: RpcErrorCode, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)

    @property
    def http_status(self) -> int:
        """HTTP status for this error code."""
        return ERROR_CODES[self.code][1]

    def to_envelope(self, path: str) -> dict[str, Any]:
        """Build the tRPC error envelope."""
        json_rpc_code, http_status = ERROR_CODES[self.code]
        return {
            "error": {
                "message": self.message,
                "code": json_rpc_code,
                "data": {
                    "code": self.code.value,
                    "httpStatus": http_status,
                    "path": path,
                },
            },
        }


@dataclass
class RpcContext:
    """
    Per-call context. The token comes from the Authorization header, never from input.

    When a session is given, every call runs inside its own savepoint on it.
    """

    token: str
    domain: Domain
    session: AsyncSession | None = None


Handler = Callable[[RpcContext, Any], Awaitable[Any]]


@dataclass(frozen=True)
class Procedure:
    """A registered procedure."""

    name: str
    type: ProcedureType
    input_model: type[BaseModel] | None
    handler: Handler

    def parse_input(self, raw: Any) -> BaseModel | None:
        """
        Validate raw input against the declared model.

        Procedures without an input model ignore their input. A missing input
        is validated as an empty object.

        Raises:
            ValidationError: If the input does not match the model.
        """
        if self.input_model is None:
            return None
        return self.input_model.model_validate({} if raw is None else raw)


@dataclass
class RpcResult:
    """Outcome of one call: HTTP status plus the tRPC envelope."""

    status: int
    body: dict[str, Any]


def format_validation_error(e: ValidationError) -> str:
    """Flatten pydantic errors into 'field: message' pairs."""
    messages = []
    for err in e.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "input"
        messages.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(messages) if messages else "Invalid input"


def to_rpc_error(exc: Exception, path: str) -> RpcError:
    """Translate a domain or validation exception into an RpcError."""
    if isinstance(exc, RpcError):
        return exc
    if isinstance(exc, UnauthenticatedError):
        return RpcError(RpcErrorCode.UNAUTHORIZED, str(exc))
    if isinstance(exc, NotFoundError):
        return RpcError(RpcErrorCode.NOT_FOUND, str(exc))
    if isinstance(exc, ValidationError):
        return RpcError(RpcErrorCode.BAD_REQUEST, format_validation_error(exc))
    logger.exception("Unhandled error in procedure %s", path, exc_info=exc)
    return RpcError(RpcErrorCode.INTERNAL_SERVER_ERROR, "Internal server error")


class RpcRouter:
    """Registry of named procedures and their dispatch."""

    def __init__(self) -> None:
        self._procedures: dict[str, Procedure] = {}

    def _register(
        self,
        name: str,
        procedure_type: ProcedureType,
        input_model: type[BaseModel] | None,
        handler: Handler,
    ) -> None:
        if name in self._procedures:
            raise ValueError(f"Procedure already registered: {name}")
        self._procedures[name] = Procedure(name, procedure_type, input_model, handler)

    def query(
        self, name: str, input_model: type[BaseModel] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a query. The handler's return value is the call's output."""
        def decorator(handler: Handler) -> Handler:
            self._register(name, ProcedureType.QUERY, input_model, handler)
            return handler
        return decorator

    def mutation(
        self, name: str, input_model: type[BaseModel] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a mutation. The call outputs SUCCESS whatever the handler returns."""
        def decorator(handler: Handler) -> Handler:
            async def run(ctx: RpcContext, data: Any) -> str:
                await handler(ctx, data)
                return SUCCESS

            self._register(name, ProcedureType.MUTATION, input_model, run)
            return handler
        return decorator

    @property
    def procedures(self) -> dict[str, Procedure]:
        """Registered procedures by name."""
        return dict(self._procedures)

    def get(self, name: str) -> Procedure:
        """
        Look up a procedure.

        Raises:
            RpcError: NOT_FOUND if no procedure has this name.
        """
        procedure = self._procedures.get(name)
        if procedure is None:
            raise RpcError(RpcErrorCode.NOT_FOUND, f'No procedure found on path "{name}"')
        return procedure

    async def call(
        self,
        name: str,
        procedure_type: ProcedureType,
        raw_input: Any,
        ctx: RpcContext,
    ) -> Any:
        """
        Run one procedure: look up, check kind, validate input, invoke.

        Input is validated before the handler runs, so malformed input never
        reaches the domain. A handler that raises has its writes rolled back
        to the call's savepoint, leaving the request transaction usable for
        the calls after it.
        """
        procedure = self.get(name)
        if procedure.type != procedure_type:
            raise RpcError(
                RpcErrorCode.METHOD_NOT_SUPPORTED,
                f'Unsupported {procedure_type.value} call on {procedure.type.value} "{name}"',
            )
        data = procedure.parse_input(raw_input)
        if ctx.session is None:
            return await procedure.handler(ctx, data)
        async with ctx.session.begin_nested():
            return await procedure.handler(ctx, data)

    async def dispatch(
        self,
        name: str,
        procedure_type: ProcedureType,
        raw_input: Any,
        ctx: RpcContext,
    ) -> RpcResult:
        """Run one procedure and wrap its output or error in a tRPC envelope."""
        try:
            output = await self.call(name, procedure_type, raw_input, ctx)
        except Exception as exc:
            error = to_rpc_error(exc, name)
            if error.code != RpcErrorCode.INTERNAL_SERVER_ERROR:
                logger.warning("Procedure %s failed: %s %s", name, error.code.value, error.message)
            return RpcResult(error.http_status, error.to_envelope(name))
        return RpcResult(200, {"result": {"data": jsonable_encoder(output)}})


def parse_json_input(raw: str | bytes | None) -> Any:
    """
    Decode a JSON input parameter or body. Empty input decodes to None.

    Raises:
        RpcError: BAD_REQUEST if the input is not valid JSON.
    """
    if raw is None or raw in ("", b""):
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise RpcError(RpcErrorCode.BAD_REQUEST, f"Invalid JSON input: {e}") from e


def split_batch_input(raw: Any, count: int) -> list[Any]:
    """
    Split a batch input object ({"0": ..., "1": ...}) into positional inputs.

    Raises:
        RpcError: BAD_REQUEST if the batch input is not an object.
    """
    if raw is None:
        return [None] * count
    if not isinstance(raw, dict):
        raise RpcError(RpcErrorCode.BAD_REQUEST, '"input" needs to be an object when doing a batch call')
    return [raw.get(str(index)) for index in range(count)]
