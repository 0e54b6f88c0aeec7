import base64
import binascii
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Literal, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from protopeek import config
from protopeek.errors import DecodeError
from protopeek.message import decode
from protopeek.render import lines_from_resolved, tree_from_resolved
from protopeek.resolver import resolve


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.setup_logging()
    logging.info("protopeek decode service starting")
    yield
    logging.info("protopeek decode service shutting down")


app = FastAPI(title="protopeek", description="Schema-less protobuf decoding", lifespan=lifespan)


class DecodeRequest(BaseModel):
    data: str
    encoding: Literal["base64", "hex"] = "base64"
    groups: Optional[Literal["skip", "nest"]] = None


class FileDecodeRequest(BaseModel):
    path: str
    groups: Optional[Literal["skip", "nest"]] = None


class DecodeResponse(BaseModel):
    field_count: int
    lines: List[str]
    tree: List[Dict[str, Any]]


def payload_bytes(req: DecodeRequest) -> bytes:
    try:
        if req.encoding == "hex":
            return bytes.fromhex(req.data)
        return base64.b64decode(req.data, validate=True)
    except (ValueError, binascii.Error) as e:
        raise HTTPException(status_code=400, detail=f"Invalid {req.encoding} data: {e}")


def check_size(size: int):
    if size > config.MAX_UPLOAD:
        raise HTTPException(status_code=413, detail=f"Payload larger than {config.MAX_UPLOAD} bytes")


def decode_response(data: bytes, groups, source: str) -> DecodeResponse:
    check_size(len(data))
    try:
        message = decode(data)
    except DecodeError as e:
        logging.error(f"Decode of {source} failed: {e}")
        cause = f" ({e.__cause__})" if e.__cause__ else ""
        raise HTTPException(status_code=422, detail=f"{e}{cause}")

    resolved = resolve(message, groups)
    return DecodeResponse(
        field_count=len(message),
        lines=lines_from_resolved(resolved),
        tree=tree_from_resolved(resolved),
    )


#routes

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/decode", response_model=DecodeResponse)
def decode_payload(req: DecodeRequest):
    """Decodes an inline base64 or hex payload."""
    data = payload_bytes(req)
    return decode_response(data, req.groups, "request payload")


@app.post("/decode/file", response_model=DecodeResponse)
def decode_file(req: FileDecodeRequest):
    """Decodes a file already on the server's disk."""
    if not os.path.isfile(req.path):
        raise HTTPException(status_code=404, detail="File not found")
    check_size(os.path.getsize(req.path))

    with open(req.path, "rb") as f:
        data = f.read()
    return decode_response(data, req.groups, req.path)


def main():
    try:
        config.validate()
    except config.ConfigError as e:
        print(f"Error: bad configuration: {e}", file=sys.stderr)
        sys.exit(1)
    uvicorn.run(app, host=config.SERVER_HOST, port=config.SERVER_PORT)


if __name__ == "__main__":
    main()
