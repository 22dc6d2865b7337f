"""Realtime market events over Redis Pub/Sub.

Published after the database transaction commits, so subscribers never see
a pool update that was rolled back. Publishing is best effort: a Redis
outage is logged and does not fail the stake or settlement it reports.
"""
import json
import logging
from typing import Any

from redis.exceptions import RedisError

from src.wb_betting.domain.models import Stake
from src.wb_common.datetime_utils import utc_now
from src.wb_common.redis_client import get_redis, market_channel
from src.wb_market.domain.models import Market
from src.wb_settlement.domain.settlement import SettlementResult

logger = logging.getLogger(__name__)


def pool_updated_event(market: Market, stake: Stake) -> dict[str, Any]:
    return {
        "type": "POOL_UPDATED",
        "market_id": market.id,
        "yes_pool": market.yes_pool,
        "no_pool": market.no_pool,
        "stake": {"side": stake.side.value, "amount": stake.amount},
        "ts": utc_now().isoformat(),
    }


def market_finalized_event(market: Market, result: SettlementResult) -> dict[str, Any]:
    return {
        "type": "MARKET_CANCELLED" if result.cancelled else "MARKET_SETTLED",
        "market_id": market.id,
        "status": market.status.value,
        "outcome": result.outcome.value if result.outcome else None,
        "charity_fee": result.charity_fee,
        "total_paid": result.total_paid,
        "ts": utc_now().isoformat(),
    }


class MarketEventPublisher:
    async def publish(self, market_id: str, event: dict[str, Any]) -> bool:
        """Publish one event; returns False when Redis is unavailable."""
        try:
            redis = await get_redis()
            await redis.publish(market_channel(market_id), json.dumps(event))
        except RedisError as exc:
            logger.warning(
                "Event publish failed: market=%s type=%s error=%s",
                market_id, event.get("type"), exc,
            )
            return False
        return True
