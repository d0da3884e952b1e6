import logging
import random
import time
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from app.domain.models.product import InteractionEvent, Product, ScoredProduct
from app.domain.services.constants import (
    ACTION_WEIGHTS,
    CATEGORY_RANK_POINTS,
    DEFAULT_ACTION_WEIGHT,
    DEFAULT_LIMIT,
    NOVELTY_BONUS,
    RELATED_CATEGORY_MATCH,
    RELATED_TAG_MATCH,
    TAG_RANK_POINTS,
    TRENDING_WINDOW_DAYS,
)
from app.domain.services.interaction_log import InteractionLog, utcnow
from app.domain.services.product_cache import ProductCache, index_by_keys

logger = logging.getLogger(__name__)


# ----- Pure scoring helpers -------------------------------------------------

def action_weight(action: str) -> int:
    return ACTION_WEIGHTS.get(action, DEFAULT_ACTION_WEIGHT)


def _ranked(counts: Dict[str, int]) -> List[str]:
    # sorted() is stable: equal weights keep first-seen order
    return sorted(counts, key=lambda k: counts[k], reverse=True)


def preference_ranking(
    history: Sequence[InteractionEvent],
    products: Sequence[Product],
) -> Tuple[List[str], List[str]]:
    """
    Weighted category and tag preferences inferred from a user's history.
    Returns (categories, tags), each most-preferred first. Events pointing at
    products missing from the catalog are skipped.
    """
    by_id = index_by_keys(products)
    category_count: Dict[str, int] = {}
    tag_count: Dict[str, int] = {}

    for event in history:
        product = by_id.get(event.product_id)
        if product is None:
            continue
        weight = action_weight(event.action.value)
        if product.category is not None:
            category_count[product.category] = category_count.get(product.category, 0) + weight
        for tag in product.tags:
            tag_count[tag] = tag_count.get(tag, 0) + weight

    return _ranked(category_count), _ranked(tag_count)


def score_for_user(
    history: Sequence[InteractionEvent],
    products: Sequence[Product],
) -> List[ScoredProduct]:
    """
    Affinity score of every product against the history, in catalog order.

    A category ranked i-th of n adds (n - i) * 10, each tag ranked j-th of m
    adds (m - j) * 5, and products never interacted with get +2.
    """
    categories, tags = preference_ranking(history, products)
    category_rank = {c: i for i, c in enumerate(categories)}
    tag_rank = {t: i for i, t in enumerate(tags)}
    seen = {e.product_id for e in history}

    scored: List[ScoredProduct] = []
    for product in products:
        score = 0
        if product.category in category_rank:
            score += (len(categories) - category_rank[product.category]) * CATEGORY_RANK_POINTS
        for tag in product.tags:
            if tag in tag_rank:
                score += (len(tags) - tag_rank[tag]) * TAG_RANK_POINTS
        if product.keys.isdisjoint(seen):
            score += NOVELTY_BONUS
        scored.append(ScoredProduct(product=product, score=score))
    return scored


def score_related(reference: Product, products: Sequence[Product]) -> List[ScoredProduct]:
    """Category match +20, each shared tag +10. The reference itself is excluded."""
    scored: List[ScoredProduct] = []
    for other in products:
        if not other.keys.isdisjoint(reference.keys):
            continue
        score = 0
        if reference.category is not None and other.category == reference.category:
            score += RELATED_CATEGORY_MATCH
        other_tags = set(other.tags)
        for tag in reference.tags:
            if tag in other_tags:
                score += RELATED_TAG_MATCH
        scored.append(ScoredProduct(product=other, score=score))
    return scored


def top(scored: Sequence[ScoredProduct], limit: int) -> List[Product]:
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)
    return [s.product for s in ranked[:max(limit, 0)]]


def trending_products(events: Sequence[InteractionEvent], products: Sequence[Product]) -> List[Product]:
    """
    Catalog products ordered by how many events name them, by `id` or `_id`.
    Events for products missing from the catalog are ignored.
    """
    by_id = index_by_keys(products)
    resolved = [by_id[e.product_id] for e in events if e.product_id in by_id]
    first = {}
    for p in resolved:
        first.setdefault(p.id, p)
    # Counter keeps first-seen order among equal counts
    return [first[pid] for pid, _ in Counter(p.id for p in resolved).most_common()]


# ----- Context ----------------------------------------------------------------

class RecoContext:
    """
    Holds everything the recommendation operations read: the interaction log,
    the catalog snapshot, the RNG used for discovery picks and the clock.
    One instance per app (see lifespan) or per test.
    """

    def __init__(
        self,
        log: InteractionLog,
        cache: ProductCache,
        *,
        rng: Optional[random.Random] = None,
        now: Callable[[], datetime] = utcnow,
        trending_window_days: int = TRENDING_WINDOW_DAYS,
    ):
        self.log = log
        self.cache = cache
        self.rng = rng or random.Random()
        self.now = now
        self.trending_window = timedelta(days=trending_window_days)

    async def record(self, user_id: str, product_id: str, action) -> InteractionEvent:
        return await self.log.record(user_id, product_id, action)

    async def recommend(self, user_id: str, limit: int = DEFAULT_LIMIT) -> List[Product]:
        """
        Personalized products for `user_id`.
        Without history, a random sample of the catalog ("discovery").
        """
        t0 = time.perf_counter()
        products = await self.cache.ensure_loaded()
        if limit <= 0 or not products:
            return []

        history = self.log.for_user(user_id)
        if not history:
            picks = self.rng.sample(products, min(limit, len(products)))
            logger.info("recommend discovery user_id=%s items=%s", user_id, len(picks))
            return picks

        items = top(score_for_user(history, products), limit)
        logger.info("recommend done user_id=%s history=%s items=%s total_time=%.3fs",
                    user_id, len(history), len(items), time.perf_counter() - t0)
        return items

    async def related(self, product_id: str, limit: int = DEFAULT_LIMIT) -> List[Product]:
        """Products close to `product_id` by category and tags, never the product itself."""
        products = await self.cache.ensure_loaded()
        if limit <= 0:
            return []

        reference = self.cache.find(product_id)
        if reference is None:
            logger.info("related unknown product_id=%s, returning catalog head", product_id)
            return products[:limit]

        items = top(score_related(reference, products), limit)
        logger.info("related done product_id=%s items=%s", product_id, len(items))
        return items

    async def trending(self, limit: int = DEFAULT_LIMIT) -> List[Product]:
        """Most interacted-with products across all users over the trailing window."""
        products = await self.cache.ensure_loaded()
        if limit <= 0:
            return []

        cutoff = self.now() - self.trending_window
        recent = self.log.since(cutoff)
        items = trending_products(recent, products)[:limit]
        logger.info("trending done recent_events=%s items=%s", len(recent), len(items))
        return items

    async def by_category(self, category: str) -> List[Product]:
        products = await self.cache.ensure_loaded()
        return [p for p in products if p.category == category]
