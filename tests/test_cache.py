"""Tests for the rebuild-on-change graph cache."""

from wayfinder.generators import generate_sample_campus
from wayfinder.graph import GraphCache
from wayfinder.models import Intersection, LatLng


class TestGraphCache:
    def test_reuses_graph_for_unchanged_campus(self):
        campus = generate_sample_campus()
        cache = GraphCache()
        first = cache.get(campus)
        second = cache.get(campus)
        assert first is second
        assert cache.builds == 1
        assert cache.key == campus.cache_key()

    def test_equal_snapshot_shares_graph(self):
        cache = GraphCache()
        first = cache.get(generate_sample_campus())
        assert cache.get(generate_sample_campus()) is first

    def test_edit_triggers_rebuild(self):
        campus = generate_sample_campus()
        cache = GraphCache()
        before = cache.get(campus)
        campus.outdoor_intersections.append(
            Intersection(id="new-corner", position=LatLng(lat=33.98, lon=-117.33))
        )
        after = cache.get(campus)
        assert after is not before
        assert "new-corner" in after
        assert cache.builds == 2

    def test_revision_bump_triggers_rebuild(self):
        campus = generate_sample_campus()
        cache = GraphCache()
        cache.get(campus)
        campus.revision += 1
        cache.get(campus)
        assert cache.builds == 2

    def test_invalidate(self):
        campus = generate_sample_campus()
        cache = GraphCache()
        cache.get(campus)
        cache.invalidate()
        assert cache.key is None
        cache.get(campus)
        assert cache.builds == 2

    def test_rebuild_always_builds(self):
        campus = generate_sample_campus()
        cache = GraphCache()
        first = cache.rebuild(campus)
        second = cache.rebuild(campus)
        assert first is not second
        assert cache.get(campus) is second
        assert cache.builds == 2
