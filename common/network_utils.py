# common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions: resolving the latest tagged release of a
GitHub project and downloading release assets.
"""
import logging
from pathlib import Path
from typing import Optional, Union

import requests

from common.exceptions import ExternalCommandError, ReleaseMetadataError

module_logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE = 8192


def fetch_latest_release_tag(
    repo: str,
    api_url: str = "https://api.github.com",
    timeout: int = 60,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Return the tag_name of the latest release of a GitHub repository.

    Args:
        repo: "owner/name" of the repository.
        api_url: Base URL of the GitHub REST API.
        timeout: Request timeout in seconds.
        current_logger: Optional logger instance.

    Raises:
        ExternalCommandError: The request failed or returned an HTTP error.
        ReleaseMetadataError: The response is not JSON or carries no tag.
    """
    logger_to_use = current_logger if current_logger else module_logger
    url = f"{api_url.rstrip('/')}/repos/{repo}/releases/latest"
    logger_to_use.info(f"Resolving latest release of {repo} from {url}")

    try:
        response = requests.get(
            url,
            headers={"Accept": "application/vnd.github+json"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.exceptions.HTTPError as http_err:
        raise ExternalCommandError(
            f"HTTP error while querying {url}: {http_err}",
            command=url,
            original_error=http_err,
        ) from http_err
    except requests.exceptions.RequestException as req_err:
        raise ExternalCommandError(
            f"Request to {url} failed: {req_err}",
            command=url,
            original_error=req_err,
        ) from req_err

    try:
        payload = response.json()
    except ValueError as json_err:
        raise ReleaseMetadataError(
            f"Release metadata from {url} is not valid JSON.",
            command=url,
            original_error=json_err,
        ) from json_err

    tag = payload.get("tag_name") if isinstance(payload, dict) else None
    if not isinstance(tag, str) or not tag.strip():
        raise ReleaseMetadataError(
            f"Release metadata from {url} has no 'tag_name'.",
            command=url,
        )

    tag = tag.strip()
    logger_to_use.info(f"Latest {repo} release: {tag}")
    return tag


def build_apt_source_url(
    download_url: str, repo: str, tag: str, codename: str
) -> str:
    """URL of the ros2-apt-source .deb for a release tag and Ubuntu codename."""
    return (
        f"{download_url.rstrip('/')}/{repo}/releases/download/{tag}/"
        f"ros2-apt-source_{tag}.{codename}_all.deb"
    )


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    timeout: int = 120,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Download url to download_to_path, streaming the body to disk.

    Returns:
        The path the file was written to.

    Raises:
        ExternalCommandError: Any HTTP, connection or file I/O error.
    """
    logger_to_use = current_logger if current_logger else module_logger
    download_path = Path(download_to_path)
    response: Optional[requests.Response] = None

    try:
        download_path.parent.mkdir(parents=True, exist_ok=True)
        response = requests.get(url, stream=True, timeout=timeout)
        response.raise_for_status()

        with open(download_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
    except requests.exceptions.HTTPError as http_err:
        status_code = response.status_code if response is not None else "Unknown"
        raise ExternalCommandError(
            f"HTTP error downloading {url}: {http_err} - Status code: {status_code}",
            command=url,
            original_error=http_err,
        ) from http_err
    except requests.exceptions.RequestException as req_err:
        raise ExternalCommandError(
            f"Download of {url} failed: {req_err}",
            command=url,
            original_error=req_err,
        ) from req_err
    except OSError as io_err:
        raise ExternalCommandError(
            f"File I/O error when saving {url} to {download_path}: {io_err}",
            command=url,
            original_error=io_err,
        ) from io_err

    logger_to_use.info(f"Downloaded {url} to {download_path}")
    return download_path
