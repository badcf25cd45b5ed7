"""Tests for the attr rule."""

import re

import pytest

from svglinter.rules import attr

SVG = """<svg role="img" viewBox="0 0 24 24">
    <g id="foo">
        <path d="bar"></path>
    </g>
    <g></g>
    <circle></circle>
    <rect height="100" width="300" style="fill:black;" />
</svg>"""


@pytest.fixture
def check(run_rule):
    """Run the attr rule on SVG (or another source) and return the Reporter."""
    def _check(config, source=SVG):
        return run_rule(attr.generate(config), source)
    return _check


class TestPresence:
    """Test required and disallowed attributes."""

    def test_empty_config(self, check):
        assert check({}).messages == []

    def test_required_present(self, check):
        assert not check({"role": True, "rule::selector": "svg"}).has_errors

    def test_required_missing(self, check):
        reporter = check({"id": True, "rule::selector": "g"})

        assert len(reporter.errors) == 1
        assert reporter.errors[0].reason == "Expected attribute 'id', didn't find it at node <g>"

    def test_disallowed_absent(self, check):
        assert not check({"foo": False, "rule::selector": "svg"}).has_errors

    def test_disallowed_present(self, check):
        reporter = check({"role": False, "rule::selector": "svg"})
        assert reporter.errors[0].reason == "Attribute 'role' is disallowed at node <svg>"

    def test_wildcard_default(self, check):
        assert check({"id": False}).has_errors
        assert not check({"foobar": False}).has_errors
        assert check({"viewBox": False}).has_errors


class TestValues:
    """Test string, list and pattern descriptors."""

    def test_exact_value(self, check):
        assert not check({"role": "img", "rule::selector": "svg"}).has_errors

        reporter = check({"role": "presentation", "rule::selector": "svg"})
        assert reporter.errors[0].reason == (
            "Expected attribute 'role' to be \"presentation\", was \"img\" at node <svg>"
        )

    def test_one_of(self, check):
        assert not check({"role": ["img", "progressbar"], "rule::selector": "svg"}).has_errors

        reporter = check({"role": ["foo", "bar"], "rule::selector": "svg"})
        assert reporter.errors[0].reason.startswith("Expected attribute 'role' to be one of ['foo', 'bar']")

    def test_pattern(self, check):
        assert not check({"role": re.compile(r"^im.$"), "rule::selector": "svg"}).has_errors
        assert check({"role": re.compile(r"^.im$"), "rule::selector": "svg"}).has_errors

    def test_pattern_requires_attribute(self, check):
        reporter = check({"foo": re.compile(r"^img$"), "rule::selector": "svg"})
        assert reporter.errors[0].reason == "Expected attribute 'foo', didn't find it at node <svg>"

    def test_json_pattern(self, check):
        assert not check({"viewBox": {"pattern": r"^0 0 \d+ \d+$"}, "rule::selector": "svg"}).has_errors
        assert not check({"role": {"pattern": "^IMG$", "flags": "i"}, "rule::selector": "svg"}).has_errors
        assert check({"viewBox": {"pattern": "^1"}, "rule::selector": "svg"}).has_errors

    def test_unknown_descriptor_warns(self, check):
        reporter = check({"role": 5, "rule::selector": "svg"})

        assert reporter.has_warns
        assert not reporter.has_errors


class TestWhitelist:
    """Test whitelist mode and optional attributes."""

    def test_all_allowed(self, check):
        config = {
            "role": ["img", "progressbar"],
            "viewBox": True,
            "rule::selector": "svg",
            "rule::whitelist": True,
        }
        assert check(config).messages == []

    def test_required_and_unused_optional(self, check):
        config = {
            "width": True,
            "height": True,
            "style": True,
            "x?": True,
            "rule::selector": "rect",
            "rule::whitelist": True,
        }
        assert check(config).messages == []

    def test_present_optional(self, check):
        config = {
            "width": True,
            "height": True,
            "style?": True,
            "rule::selector": "rect",
            "rule::whitelist": True,
        }
        assert check(config).messages == []

    def test_extra_attribute(self, check):
        reporter = check({
            "role": ["img", "progressbar"],
            "rule::selector": "svg",
            "rule::whitelist": True,
        })

        assert len(reporter.errors) == 1
        assert reporter.errors[0].reason == (
            "Found extra attributes ['viewBox'] with whitelisting enabled at node <svg>"
        )

    def test_invalid_optional_value(self, check):
        reporter = check({
            "role": ["img", "progressbar"],
            "viewBox?": "0 0 25 25",
            "rule::selector": "svg",
            "rule::whitelist": True,
        })
        assert len(reporter.errors) == 1

    def test_without_attributes(self, check):
        assert check({"rule::selector": "circle", "rule::whitelist": True}).messages == []
        assert check({"rule::selector": "svg", "rule::whitelist": True}).has_errors


class TestOrdering:
    """Test attribute ordering, which only looks at the listed attributes."""

    def test_right_order(self, check):
        assert not check({"rule::selector": "rect", "rule::order": ["height", "width", "style"]}).has_errors

    def test_wrong_order(self, check):
        reporter = check({"rule::selector": "rect", "rule::order": ["width", "style", "height"]})
        assert len(reporter.errors) == 1
        assert reporter.errors[0].reason.startswith("Wrong ordering of attributes")

    def test_partial_order(self, check):
        assert not check({"rule::selector": "rect", "rule::order": ["height", "width"]}).has_errors
        assert not check({"rule::selector": "rect", "rule::order": ["height", "style"]}).has_errors

    def test_alphabetical(self, check):
        assert not check({"rule::selector": "svg", "rule::order": True}).has_errors
        assert check({"rule::selector": "rect", "rule::order": True}).has_errors

    def test_with_whitelist(self, check):
        failing = SVG.replace('viewBox="0 0 24 24"', 'foo="bar" viewBox="0 0 24 24"')
        reporter = check({
            "role": True,
            "viewBox": True,
            "foo": "bar",
            "rule::selector": "svg",
            "rule::whitelist": True,
            "rule::order": ["viewBox", "role"],
        }, failing)
        assert len(reporter.errors) == 1

        passing = SVG.replace('viewBox="0 0 24 24"', 'foo="bar" bar="baz" viewBox="0 0 24 24"')
        reporter = check({
            "role": True,
            "viewBox": True,
            "foo": True,
            "bar": True,
            "rule::selector": "svg",
            "rule::whitelist": True,
            "rule::order": ["role", "foo", "bar", "viewBox"],
        }, passing)
        assert reporter.messages == []


class TestSoftOrderingAndOptionals:
    """Test soft ordering and optional attributes on a single element."""

    SOURCE = '<svg><rect height="1" foo="2" width="3"/><rect width="3"/><rect width="3" style="x"/></svg>'

    def test_unlisted_attributes_ignored(self, check):
        assert not check({"rule::selector": "rect", "rule::order": ["height", "width"]}, self.SOURCE).has_errors
        reporter = check({"rule::selector": "rect", "rule::order": ["width", "height"]}, self.SOURCE)
        assert len(reporter.errors) == 1
        assert reporter.errors[0].line == 1

    def test_optional_under_whitelist(self, check):
        config = {"width": True, "style?": True, "rule::selector": "rect", "rule::whitelist": True}
        reporter = check(config, self.SOURCE)

        # only the first rect carries attributes outside {width, style}
        assert len(reporter.errors) == 1
        assert reporter.errors[0].reason.startswith("Found extra attributes ['height', 'foo']")

    def test_optional_false(self, check):
        reporter = check({"style?": False, "rule::selector": "rect"}, self.SOURCE)
        assert [r.reason for r in reporter.errors] == ["Attribute 'style' is disallowed at node <rect>"]
