from __future__ import annotations
import asyncio
import base64
from typing import Awaitable, Callable
from .errors import InvalidPhotoInput
from .models import PhotoBlob

# Decoders raise PhotoDecodeFailure (or any other error) when the blob is unreadable.
PhotoDecoder = Callable[[PhotoBlob], Awaitable[str]]

NOT_AN_IMAGE = "Please choose an image file."
UNREADABLE_IMAGE = "Could not read that image. Please try another one."


def validate_photo(blob: PhotoBlob) -> None:
    if not blob.is_image:
        raise InvalidPhotoInput(f"{blob.filename or 'blob'} is {blob.media_type or 'untyped'}")


def _encode(blob: PhotoBlob) -> str:
    payload = base64.b64encode(blob.data).decode("utf-8")
    return f"data:{blob.media_type};base64,{payload}"


async def read_blob_as_data_url(blob: PhotoBlob) -> str:
    return await asyncio.to_thread(_encode, blob)
