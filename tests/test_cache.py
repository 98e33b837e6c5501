import threading

import pytest

from backend.app.brain.cache import ResponseCache


def payload(text="answer", confidence=0.8, source="direct"):
    return {"response": text, "intent": "projects", "confidence": confidence, "source": source}


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_seconds=300, max_entries=1000, clock=clock)


def test_round_trip_marks_payload_as_cached(cache):
    cache.put("Tell me about projects", "projects", payload(), 0.8)
    hit = cache.get("  TELL me about projects ", "projects")
    assert hit == {
        "response": "answer",
        "intent": "projects",
        "confidence": 0.8,
        "source": "direct_cached",
        "cached": True,
    }


def test_cached_payload_is_a_copy(cache):
    original = payload()
    cache.put("q", "projects", original, 0.8)
    original["response"] = "changed"
    first = cache.get("q", "projects")
    first["response"] = "mutated"
    assert cache.get("q", "projects")["response"] == "answer"


def test_intent_is_part_of_the_key(cache):
    cache.put("tell me more", "projects", payload(), 0.8)
    assert cache.get("tell me more", "skills") is None


def test_entry_expires_after_ttl(cache, clock):
    cache.put("q", "projects", payload(), 0.8)
    clock.advance(300)
    assert cache.get("q", "projects") is not None
    clock.advance(1)
    assert cache.get("q", "projects") is None
    assert len(cache) == 0


def test_similar_query_at_threshold_is_a_hit(cache):
    cache.put("show me your latest projects", "projects", payload(), 0.8)
    hit = cache.get("show me your latest", "projects")
    assert hit is not None
    assert hit["source"] == "direct_similar"
    assert hit["confidence"] == pytest.approx(0.72)
    assert hit["cached"] is True


def test_similar_query_below_threshold_is_a_miss(cache):
    cache.put("show me your projects", "projects", payload(), 0.8)
    assert cache.get("show me your", "projects") is None


def test_similar_lookup_skips_expired_entries(cache, clock):
    cache.put("show me your latest projects", "projects", payload(), 0.8)
    clock.advance(301)
    assert cache.get("show me your latest", "projects") is None


def test_similar_lookup_returns_first_qualifying_entry(cache):
    cache.put("a b c d e f g h i", "projects", payload("first"), 0.8)
    cache.put("a b c d e f g h i j k", "projects", payload("second"), 0.8)
    # 0.9 against the first entry, about 0.91 against the second
    hit = cache.get("a b c d e f g h i j", "projects")
    assert hit["response"] == "first"
    assert hit["source"] == "direct_similar"


def test_full_cache_evicts_oldest_fifth(clock):
    cache = ResponseCache(ttl_seconds=300, max_entries=10, clock=clock)
    for i in range(10):
        cache.put(f"query {i}", "projects", payload(f"answer {i}"), 0.8)
        clock.advance(1)
    cache.put("query 10", "projects", payload("answer 10"), 0.8)

    assert len(cache) == 9
    assert cache.get("query 0", "projects") is None
    assert cache.get("query 1", "projects") is None
    assert cache.get("query 2", "projects")["response"] == "answer 2"
    assert cache.get("query 10", "projects")["response"] == "answer 10"
    assert cache.stats()["evictions"] == 2


def test_overwrite_does_not_evict(clock):
    cache = ResponseCache(ttl_seconds=300, max_entries=2, clock=clock)
    cache.put("a", "projects", payload("1"), 0.8)
    cache.put("b", "projects", payload("2"), 0.8)
    cache.put("a", "projects", payload("3"), 0.8)
    assert len(cache) == 2
    assert cache.get("a", "projects")["response"] == "3"


def test_capacity_of_one_still_evicts(clock):
    cache = ResponseCache(ttl_seconds=300, max_entries=1, clock=clock)
    cache.put("first", "projects", payload("1"), 0.8)
    cache.put("second", "projects", payload("2"), 0.8)
    assert len(cache) == 1
    assert cache.get("second", "projects")["response"] == "2"


def test_stats_and_clear(cache):
    cache.put("show me your latest projects", "projects", payload(), 0.8)
    cache.get("show me your latest projects", "projects")
    cache.get("show me your latest", "projects")
    cache.get("nothing like it", "projects")
    cache.get("also nothing", "projects")

    stats = cache.stats()
    assert stats["size"] == 1
    assert stats["maxSize"] == 1000
    assert stats["ttlSeconds"] == 300
    assert stats["hits"] == 1
    assert stats["similarHits"] == 1
    assert stats["misses"] == 2
    assert stats["hitRate"] == 0.5

    cache.clear()
    assert len(cache) == 0
    assert cache.stats()["hits"] == 0


def test_warmup_stores_responder_results(cache):
    def responder(query):
        if query == "skip me":
            return None
        return {"response": f"about {query}", "intent": "skills", "confidence": 0.8, "source": "direct"}

    stored = cache.warmup("skills", ["react", "node", "skip me"], responder)
    assert stored == 2
    assert cache.get("react", "skills")["response"] == "about react"
    assert cache.get("skip me", "skills") is None


def test_concurrent_put_get_keeps_capacity():
    cache = ResponseCache(ttl_seconds=300, max_entries=50)
    errors = []

    def worker(n):
        try:
            for i in range(2000):
                query = f"worker {n} query {i % 120}"
                cache.put(query, "projects", payload(query), 0.8)
                hit = cache.get(query, "projects")
                if hit is not None:
                    assert hit["response"] == query
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert 0 < len(cache) <= 50
    assert cache.stats()["size"] == len(cache)
