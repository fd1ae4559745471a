# travel_quote/utils/config_store.py
from __future__ import annotations

from pathlib import Path
from typing import Tuple
from urllib.parse import urlparse

import boto3


def parse_s3_uri(uri: str) -> Tuple[str, str]:
    p = urlparse(uri)
    if p.scheme != "s3" or not p.netloc:
        raise ValueError(f"Config URI must be s3://bucket/key, got: {uri}")
    return p.netloc, p.path.lstrip("/")


def ensure_config_downloaded(
    *,
    config_s3_uri: str,
    local_path: str,
    aws_region: str | None = None,
    force: bool = False,
) -> str:
    """
    Ensure the pricing snapshot exists at local_path. If not (or force), download from S3.
    Returns local_path.
    """
    bucket, key = parse_s3_uri(config_s3_uri)

    lp = Path(local_path)
    if not force and lp.exists() and lp.stat().st_size > 0:
        return str(lp)

    lp.parent.mkdir(parents=True, exist_ok=True)

    s3 = boto3.client("s3", region_name=aws_region) if aws_region else boto3.client("s3")
    s3.download_file(bucket, key, str(lp))
    return str(lp)
