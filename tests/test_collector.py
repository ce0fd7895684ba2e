"""Tests for the request-scoped registry."""

import pytest

from brother_exporter.collector import (
    ScrapeRegistry,
    collect_target,
    new_registry,
    render,
    scrape,
)
from brother_exporter.errors import (
    DuplicateMetricError,
    MalformedDocumentError,
    TransportError,
)
from brother_exporter.publisher import MetricSet


def sample_value(registry, name, host):
    return registry.get_sample_value(name, {"host": host})


def families(scrape_registry):
    return {family.name: family for family in scrape_registry.registry.collect()}


class TestScrapeRegistry:
    """Tests for ScrapeRegistry class."""

    def test_gauges_shared_across_hosts(self):
        """Test one gauge per metric name, one sample per host."""
        scrape_registry = ScrapeRegistry()
        scrape_registry.add(MetricSet(target="a", success=1.0, values={"brother_total": 1.0}))
        scrape_registry.add(MetricSet(target="b", success=1.0, values={"brother_total": 2.0}))

        result = families(scrape_registry)

        assert set(result) == {"brother_success", "brother_total"}
        assert len(result["brother_total"].samples) == 2

    def test_duplicate_host_rejected(self):
        """Test adding the same host twice is a duplicate registration."""
        scrape_registry = ScrapeRegistry()
        scrape_registry.add(MetricSet(target="a", success=1.0))

        with pytest.raises(DuplicateMetricError):
            scrape_registry.add(MetricSet(target="a", success=1.0))

    def test_duplicate_leaves_registry_unchanged(self):
        """Test a rejected set adds none of its gauges."""
        scrape_registry = ScrapeRegistry()
        scrape_registry.add(MetricSet(target="a", success=1.0))

        with pytest.raises(DuplicateMetricError):
            scrape_registry.add(
                MetricSet(target="a", success=1.0, values={"brother_x": 1.0})
            )

        assert set(families(scrape_registry)) == {"brother_success"}
        assert len(scrape_registry.metric_sets) == 1

    def test_help_text(self):
        scrape_registry = ScrapeRegistry()
        scrape_registry.add(MetricSet(target="a", success=1.0, values={"brother_total": 1.0}))

        result = families(scrape_registry)

        assert result["brother_success"].documentation.startswith("Indicates if")
        assert result["brother_total"].documentation == "Metric total for Brother printer"


class TestNewRegistry:
    """Tests for the registry factory."""

    def test_fresh_registry_each_call(self):
        """Test every call returns a new, empty registry."""
        first = new_registry()
        second = new_registry()

        assert first is not second
        assert first.registry is not second.registry
        assert list(first.registry.collect()) == []


class TestCollectTarget:
    """Tests for fetch-then-publish of one target."""

    def test_success(self, fake_client):
        fake_client.documents["a"] = {"total": "120"}
        result = collect_target("a", fake_client)

        assert result.success == 1.0
        assert result.values == {"brother_total": 120.0}

    def test_transport_error_contained(self, fake_client):
        fake_client.documents["a"] = TransportError("a", "connection refused")
        result = collect_target("a", fake_client)

        assert result.success == 0.0
        assert result.values == {}

    def test_malformed_document_contained(self, fake_client):
        fake_client.documents["a"] = MalformedDocumentError("a", "no data row")
        result = collect_target("a", fake_client)

        assert result.success == 0.0


class TestScrape:
    """Tests for scrape function."""

    def test_sequential_targets(self, fake_client):
        """Test targets are fetched in order into one registry."""
        fake_client.documents["a"] = {"total": "120", "level_percent": "45.5"}
        fake_client.documents["b"] = TransportError("b", "timed out")

        registry = scrape(["a", "b"], fake_client)

        assert [c.args[0] for c in fake_client.fetch.call_args_list] == ["a", "b"]
        assert sample_value(registry, "brother_success", "a") == 1.0
        assert sample_value(registry, "brother_total", "a") == 120.0
        assert sample_value(registry, "brother_level_percent", "a") == 45.5
        assert sample_value(registry, "brother_success", "b") == 0.0
        assert sample_value(registry, "brother_total", "b") is None

    def test_no_state_between_scrapes(self, fake_client):
        """Test a second scrape does not see the first one's values."""
        fake_client.documents["a"] = {"total": "120"}
        first = scrape(["a"], fake_client)

        fake_client.documents["a"] = TransportError("a", "timed out")
        second = scrape(["a"], fake_client)

        assert first is not second
        assert sample_value(first, "brother_total", "a") == 120.0
        assert sample_value(second, "brother_total", "a") is None
        assert sample_value(second, "brother_success", "a") == 0.0

    def test_repeated_scrapes_identical(self, fake_client, sample_fields):
        """Test identical documents render identically."""
        fake_client.documents["a"] = sample_fields

        assert render(scrape(["a"], fake_client)) == render(scrape(["a"], fake_client))

    def test_duplicate_target_fails_scrape(self, fake_client):
        """Test listing the same printer twice fails the scrape."""
        fake_client.documents["a"] = {"total": "1"}

        with pytest.raises(DuplicateMetricError):
            scrape(["a", "a"], fake_client)

    def test_empty_target_list(self, fake_client):
        registry = scrape([], fake_client)
        assert render(registry) == b""


class TestRender:
    """Tests for exposition rendering."""

    def test_exposition_lines(self, fake_client):
        fake_client.documents["10.0.0.5"] = {"total": "120"}
        text = render(scrape(["10.0.0.5"], fake_client)).decode()

        assert "# TYPE brother_success gauge" in text
        assert 'brother_success{host="10.0.0.5"} 1.0' in text
        assert 'brother_total{host="10.0.0.5"} 120.0' in text
