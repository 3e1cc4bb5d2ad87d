"""
Streaming downloads from the external file host.
"""

import os
import logging
from typing import Optional
from urllib.parse import quote

import requests

from errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def file_host_url() -> str:
    return os.getenv("FILE_HOST_URL", "https://drive.google.com/uc")


def file_host_timeout() -> float:
    return float(os.getenv("FILE_HOST_TIMEOUT", "30"))


def open_stream(movie_id: Optional[str]) -> requests.Response:
    """
    Start the upstream download for ``movie_id`` and return the open response.

    The caller owns the response and must close it once the body has been
    forwarded. Nothing is retried.
    """
    if not movie_id:
        raise ValidationError("Movie ID is required")

    try:
        response = requests.get(
            file_host_url(),
            params={"export": "download", "id": movie_id},
            stream=True,
            timeout=file_host_timeout(),
        )
    except requests.exceptions.RequestException as e:
        logger.error("Error fetching file %s from file host: %s", movie_id, e)
        raise UpstreamError("Failed to fetch the movie file.") from e

    if not response.ok:
        logger.error("File host answered %s for %s", response.status_code, movie_id)
        response.close()
        raise UpstreamError("Failed to fetch the movie file.")
    return response


def attachment_headers(movie_id: Optional[str]) -> dict:
    """
    Content-Disposition for ``<movie_id>.mp4``.

    Ids that do not fit a latin-1 header get an ASCII fallback name plus the
    RFC 5987 ``filename*`` form.
    """
    if not movie_id:
        raise ValidationError("Movie ID is required")

    filename = f"{movie_id}.mp4"
    try:
        filename.encode("latin-1")
    except UnicodeEncodeError:
        return {
            "Content-Disposition": f"attachment; filename=\"movie.mp4\"; filename*=UTF-8''{quote(filename)}"
        }
    return {"Content-Disposition": f'attachment; filename="{filename}"'}
