"""
Unit tests for index aggregation and dashboard rendering.
"""

from datetime import datetime, timedelta

from pulitzer.reporting.index_generator import (
    build_index_aggregate,
    collect_index_aggregate,
    render_index_html,
    update_index_page,
)
from pulitzer.reporting.models import ClassifiedReport, IndexAggregate, newest_first


def _report(rel_path, modified_at, vendor="baofeng", model="dm32uv", rtype="read", size=100):
    return ClassifiedReport(
        path=None,
        rel_path=rel_path,
        size=size,
        modified_at=modified_at,
        title=rel_path,
        type=rtype,
        vendor=vendor,
        model=model,
    )


NOW = datetime(2024, 6, 1, 12, 0, 0)


class TestBuildIndexAggregate:
    """Tests for build_index_aggregate()."""

    def test_counts(self):
        reports = [
            _report("a.html", NOW, vendor="baofeng", model="dm32uv"),
            _report("b.html", NOW, vendor="baofeng", model="uv5r"),
            _report("c.html", NOW, vendor="anytone", model="at878"),
            _report("d.html", NOW, vendor="anytone", model="at878"),
        ]
        agg = build_index_aggregate(reports, now=NOW)
        assert agg.total_count == 4
        assert agg.vendor_count == 2
        assert agg.model_count == 3
        assert agg.generated_at == NOW

    def test_keys_are_sorted(self):
        reports = [
            _report("a.html", NOW, vendor="zeta", model="b"),
            _report("b.html", NOW, vendor="alpha", model="z"),
            _report("c.html", NOW, vendor="alpha", model="a"),
        ]
        agg = build_index_aggregate(reports)
        assert list(agg.vendor_reports) == ["alpha", "zeta"]
        assert list(agg.vendor_reports["alpha"]) == ["a", "z"]

    def test_buckets_newest_first(self):
        reports = [
            _report("old.html", NOW - timedelta(hours=48)),
            _report("mid.html", NOW - timedelta(hours=1)),
            _report("new.html", NOW),
        ]
        bucket = build_index_aggregate(reports).bucket("baofeng", "dm32uv")
        assert [r.rel_path for r in bucket] == ["new.html", "mid.html", "old.html"]
        for earlier, later in zip(bucket, bucket[1:]):
            assert earlier.modified_at >= later.modified_at

    def test_ties_broken_by_path(self):
        reports = [
            _report("c.html", NOW),
            _report("a.html", NOW),
            _report("b.html", NOW),
        ]
        bucket = build_index_aggregate(reports).bucket("baofeng", "dm32uv")
        assert [r.rel_path for r in bucket] == ["a.html", "b.html", "c.html"]

    def test_empty(self):
        agg = build_index_aggregate([], skipped_count=3)
        assert agg.total_count == agg.vendor_count == agg.model_count == 0
        assert agg.vendor_reports == {}
        assert agg.skipped_count == 3

    def test_reports_by_type(self):
        reports = [
            _report("r1.html", NOW - timedelta(days=1), vendor="b"),
            _report("r2.html", NOW, vendor="a"),
            _report("api.html", NOW, rtype="api"),
        ]
        by_type = build_index_aggregate(reports).reports_by_type()
        assert [r.rel_path for r in by_type["read"]] == ["r2.html", "r1.html"]
        assert [r.rel_path for r in by_type["api"]] == ["api.html"]


class TestNewestFirst:

    def test_does_not_mutate_input(self):
        reports = [_report("a.html", NOW - timedelta(days=1)), _report("b.html", NOW)]
        ordered = newest_first(reports)
        assert [r.rel_path for r in ordered] == ["b.html", "a.html"]
        assert [r.rel_path for r in reports] == ["a.html", "b.html"]


class TestCollectIndexAggregate:
    """Walk + classify + aggregate against a real directory tree."""

    def test_read_and_api_for_one_radio(self, reports_root, make_report):
        make_report("protocol/read/baofeng/dm32uv/x.html")
        make_report("api/baofeng/dm32uv/y.html")
        agg = collect_index_aggregate(reports_root)
        assert agg.vendor_count == 1
        assert agg.model_count == 1
        assert agg.total_count == 2
        by_type = agg.reports_by_type()
        assert len(by_type["read"]) == 1
        assert len(by_type["api"]) == 1

    def test_unknown_layout_excluded_and_counted(self, reports_root, make_report):
        make_report("unknown_layout/x.html")
        agg = collect_index_aggregate(reports_root)
        assert agg.total_count == 0
        assert agg.vendor_reports == {}
        assert agg.skipped_count == 1

    def test_matching_and_non_matching_files(self, reports_root, make_report):
        matching = [
            "protocol/read/v1/m1/a.html",
            "protocol/write/v1/m2/b.html",
            "api/v2/m1/c.html",
            "firmware/v2/m1/d.html",
            "codeplug/v3/m9/e.html",
            "cps/v3/m9/f.html",
        ]
        non_matching = [
            "loose.html",
            "protocol/other/g.html",
            "protocol/read/v1/h.html",
            "scratch/v1/m1/i.html",
        ]
        for rel in matching + non_matching:
            make_report(rel)

        agg = collect_index_aggregate(reports_root)
        indexed = sorted(r.rel_path for r in agg.iter_reports())
        assert indexed == sorted(matching)
        assert agg.total_count == len(matching)
        assert agg.skipped_count == len(non_matching)

    def test_idempotent(self, sample_tree):
        first = collect_index_aggregate(sample_tree)
        second = collect_index_aggregate(sample_tree)
        assert (first.vendor_count, first.model_count, first.total_count) == (
            second.vendor_count, second.model_count, second.total_count)
        assert first.vendor_reports == second.vendor_reports


class TestRenderIndexHtml:
    """Tests for render_index_html()."""

    def test_empty_aggregate_shows_placeholder(self):
        html = render_index_html(IndexAggregate(generated_at=NOW))
        assert "No reports yet" in html
        assert 'class="type-header"' not in html
        assert 'class="report-card"' not in html

    def test_sections_only_for_present_types(self):
        agg = build_index_aggregate([
            _report("protocol/read/baofeng/dm32uv/x.html", NOW),
            _report("api/baofeng/dm32uv/y.html", NOW, rtype="api"),
        ], now=NOW)
        html = render_index_html(agg)
        assert 'id="type-read"' in html
        assert 'id="type-api"' in html
        assert 'id="type-write"' not in html
        assert "No reports yet" not in html
        assert html.index('id="type-read"') < html.index('id="type-api"')

    def test_card_contents(self):
        agg = build_index_aggregate(
            [_report("protocol/read/baofeng/dm32uv/x.html", datetime(2006, 1, 2, 15, 4, 5), size=2048)],
            now=NOW,
        )
        html = render_index_html(agg, title="Bench Reports")
        assert "<title>Bench Reports</title>" in html
        assert 'href="protocol/read/baofeng/dm32uv/x.html"' in html
        assert "2.0 KB" in html
        assert "Jan 02, 2006 15:04:05" in html
        assert "baofeng / dm32uv" in html

    def test_names_are_escaped(self):
        agg = build_index_aggregate(
            [_report("api/<b>/m/x.html", NOW, vendor="<b>", model="m&m", rtype="api")],
            now=NOW,
        )
        html = render_index_html(agg)
        assert "<b>" not in html
        assert "&lt;b&gt;" in html
        assert "m&amp;m" in html

    def test_skipped_files_noted(self):
        html = render_index_html(IndexAggregate(generated_at=NOW, skipped_count=2))
        assert "2 file(s) outside the expected directory layout" in html


class TestUpdateIndexPage:
    """Tests for update_index_page()."""

    def test_writes_index(self, sample_tree):
        path = update_index_page(sample_tree)
        assert path == sample_tree / "index.html"
        html = path.read_text(encoding="utf-8")
        for phrase in ("REDBUG Reports", "baofeng", "dm32uv",
                       "read_analysis.html", "write_analysis.html", "api_docs.html"):
            assert phrase in html
        assert "unknown_layout/x.html" not in html

    def test_index_is_not_indexed(self, sample_tree):
        update_index_page(sample_tree)
        agg = collect_index_aggregate(sample_tree)
        assert agg.total_count == 3

    def test_overwrites_previous_index(self, reports_root, make_report):
        (reports_root / "index.html").write_text("stale")
        update_index_page(reports_root)
        html = (reports_root / "index.html").read_text(encoding="utf-8")
        assert "stale" not in html
        assert "No reports yet" in html

    def test_creates_missing_root(self, tmp_path):
        root = tmp_path / "fresh" / "reports"
        path = update_index_page(root)
        assert path.exists()

    def test_output_path_override_adjusts_links(self, tmp_path, reports_root, make_report):
        make_report("api/baofeng/dm32uv/y.html")
        out = tmp_path / "site" / "dashboard.html"
        update_index_page(reports_root, output_path=out)
        html = out.read_text(encoding="utf-8")
        assert 'href="../reports/api/baofeng/dm32uv/y.html"' in html

    def test_custom_title(self, reports_root):
        html = update_index_page(reports_root, title="Lab Reports").read_text(encoding="utf-8")
        assert "<h1>Lab Reports</h1>" in html

    def test_links_are_percent_encoded(self, reports_root, make_report):
        make_report("api/motorola/xpr#7550/50%_map v2.html")
        html = update_index_page(reports_root).read_text(encoding="utf-8")
        assert 'href="api/motorola/xpr%237550/50%25_map%20v2.html"' in html
        assert "xpr#7550" in html
