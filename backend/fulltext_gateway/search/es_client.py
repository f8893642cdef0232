"""Elasticsearch client construction and connectivity checks."""

import logging

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ConnectionError, TransportError

from fulltext_gateway.core.config import Settings

logger = logging.getLogger(__name__)


def create_es_client(config: Settings) -> Elasticsearch:
    """
    Build the Elasticsearch client shared by all in-flight requests.

    The client is thread-safe; one instance is created at application
    start-up and handed to request handlers explicitly.

    ``request_timeout`` bounds every engine round trip so a slow cluster
    cannot hold gateway workers indefinitely.
    """
    basic_auth = None
    if config.ELASTICSEARCH_USERNAME and config.ELASTICSEARCH_PASSWORD:
        basic_auth = (config.ELASTICSEARCH_USERNAME, config.ELASTICSEARCH_PASSWORD)

    client = Elasticsearch(
        [config.ELASTICSEARCH_URL],
        basic_auth=basic_auth,
        verify_certs=config.ELASTICSEARCH_VERIFY_CERTS,
        request_timeout=config.request_timeout_seconds,
        max_retries=config.ELASTICSEARCH_RETRY_MAX,
        retry_on_timeout=config.ELASTICSEARCH_RETRY_MAX > 0,
    )
    logger.debug(f"Elasticsearch client created for {config.ELASTICSEARCH_URL}")
    return client


def ping(client: Elasticsearch | None) -> bool:
    """
    Ping Elasticsearch to check connectivity.

    Returns False if the client is missing or the ping fails.
    Never raises exceptions.
    """
    if client is None:
        return False

    try:
        result = bool(client.ping())
        logger.debug(f"Elasticsearch ping: {result}")
        return result
    except (ConnectionError, TransportError) as e:
        logger.debug(f"Elasticsearch ping failed: {e}")
        return False
    except Exception as e:
        logger.warning(f"Unexpected error during Elasticsearch ping: {e}", exc_info=True)
        return False
