"""
Markdown <-> ADF conversion endpoints.
"""
from typing import Any, Dict, Optional, Union
from fastapi import APIRouter
from pydantic import BaseModel

from ticket_forge.services.markdown_encoder import markdown_to_adf
from ticket_forge.services.plain_text_decoder import adf_to_plain_text

router = APIRouter(prefix="/api/v1/adf", tags=["adf"])


class EncodeRequest(BaseModel):
    text: str = ""


class EncodeResponse(BaseModel):
    document: Optional[Dict[str, Any]] = None


class DecodeRequest(BaseModel):
    document: Union[Dict[str, Any], str, None] = None


class DecodeResponse(BaseModel):
    text: str


@router.post("/encode", response_model=EncodeResponse)
def encode(encode_request: EncodeRequest) -> EncodeResponse:
    """Encode markdown-flavoured text; ``document`` is null for blank input."""
    document = markdown_to_adf(encode_request.text)
    return EncodeResponse(document=document.to_adf() if document else None)


@router.post("/decode", response_model=DecodeResponse)
def decode(decode_request: DecodeRequest) -> DecodeResponse:
    """Decode an ADF document (or plain string) to plain text."""
    return DecodeResponse(text=adf_to_plain_text(decode_request.document))
