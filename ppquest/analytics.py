"""Analytics module for sending metrics to Datadog.

This module implements fail-open analytics integration with Datadog HTTP API.
Metric failures are logged but do not block user flow.
"""

import logging
import time
from typing import List

import requests

from ppquest.models import Quest

logger = logging.getLogger(__name__)

DATADOG_API_URL = "https://api.datadoghq.com/api/v1/series"


def send_count_metric(metric: str, tags: List[str], datadog_api_key: str) -> bool:
    """Send a single COUNT point to Datadog.

    Uses fail-open design: logs errors but returns False instead of
    raising exceptions.

    Args:
        metric: Metric name
        tags: Datadog tags in ``key:value`` form
        datadog_api_key: Datadog API key for authentication

    Returns:
        True if metric was sent successfully, False otherwise
    """
    try:
        payload = {
            "series": [{
                "metric": metric,
                "type": "count",
                "points": [[int(time.time()), 1]],
                "tags": tags
            }]
        }
        headers = {
            "Content-Type": "application/json",
            "DD-API-KEY": datadog_api_key
        }

        response = requests.post(
            DATADOG_API_URL,
            json=payload,
            headers=headers,
            timeout=5
        )

        response.raise_for_status()
        logger.info(f"Successfully sent metric {metric} {tags}")
        return True

    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to send Datadog metric {metric}: {e}")
        return False
    except Exception as e:
        logger.error(f"Unexpected error sending Datadog metric {metric}: {e}")
        return False


def send_quest_metric(quest: Quest, datadog_api_key: str) -> bool:
    """Record a completed quest, tagged by difficulty and type.

    Example:
        >>> send_quest_metric(quest, "your-api-key")
        True
    """
    return send_count_metric(
        "ppquest.quest_completed",
        [f"difficulty:{quest.difficulty.value.lower()}", f"type:{quest.type.value.lower()}"],
        datadog_api_key,
    )


def send_badge_metric(badge_id: str, datadog_api_key: str) -> bool:
    """Record a badge unlock."""
    return send_count_metric("ppquest.badge_unlocked", [f"badge:{badge_id}"], datadog_api_key)
