"""HTTP mount point for RPC procedures."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.procedures import rpc
from api.rpc import (
    ProcedureType,
    RpcContext,
    RpcError,
    parse_json_input,
    split_batch_input,
)
from core.auth import get_bearer_token
from db.session import get_async_session
from domain import Domain, get_domain

router = APIRouter(prefix="/trpc", tags=["trpc"])


def _is_batch(request: Request) -> bool:
    return request.query_params.get("batch") in ("1", "true")


@router.api_route("/{path}", methods=["GET", "POST"])
async def call_procedures(
    path: str,
    request: Request,
    token: str = Depends(get_bearer_token),
    domain: Domain = Depends(get_domain),
    db: AsyncSession = Depends(get_async_session),
) -> JSONResponse:
    """
    Call one procedure, or several with ?batch=1 and comma-separated names.

    GET calls queries with input from the ``input`` query parameter; POST calls
    mutations with input from the JSON body. Batched calls run in order on the
    request's database session, each in its own savepoint: a failed call is
    rolled back alone and the writes of calls reported OK are committed.
    """
    batch = _is_batch(request)
    names = path.split(",") if batch else [path]

    if request.method == "GET":
        procedure_type = ProcedureType.QUERY
        raw = request.query_params.get("input")
    else:
        procedure_type = ProcedureType.MUTATION
        raw = await request.body()

    try:
        decoded = parse_json_input(raw)
        inputs = split_batch_input(decoded, len(names)) if batch else [decoded]
    except RpcError as e:
        if not batch:
            return JSONResponse(e.to_envelope(path), status_code=e.http_status)
        return JSONResponse(
            [e.to_envelope(name) for name in names], status_code=e.http_status,
        )

    ctx = RpcContext(token=token, domain=domain, session=db)
    results = [
        await rpc.dispatch(name, procedure_type, raw_input, ctx)
        for name, raw_input in zip(names, inputs, strict=True)
    ]

    if not batch:
        return JSONResponse(results[0].body, status_code=results[0].status)

    statuses = {result.status for result in results}
    status = statuses.pop() if len(statuses) == 1 else 207
    return JSONResponse([result.body for result in results], status_code=status)
