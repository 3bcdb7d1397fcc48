# somahsap/infra/aws_clients.py
import logging

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)


def _boto_config(region: str) -> Config:
    return Config(
        region_name=region,
        retries={"max_attempts": 5, "mode": "standard"},
        connect_timeout=3,
        read_timeout=10,
    )


def make_client(service: str, region: str):
    """boto3 client met standaardconfig; wordt 1x bij startup aangemaakt en doorgegeven."""
    client = boto3.client(service, config=_boto_config(region))
    logger.info("%s client initialized region=%s", service, region)
    return client
