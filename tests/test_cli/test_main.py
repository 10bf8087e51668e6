"""
Tests for the CLI commands that work on saved reports.
"""

import argparse
import os
import tempfile

import pytest

import main
from cvlens.utils.storage import StorageManager


EXAMPLE_RESPONSE = (
    '{"items":[{"id":1,"title":"Good summary","details":"Clear and concise",'
    '"type":"strength","location":{"pageNumber":1,"coordinates":{"startY":100,"endY":140,"x":50}}}],'
    '"summary":"Solid resume"}'
)


@pytest.fixture
def storage():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        storage.save_raw_response(EXAMPLE_RESPONSE, "resume")
        yield storage


def test_report_name_for_url():
    assert main.report_name_for("https://example.com/files/jane_doe.pdf?dl=1") == "jane_doe"
    assert main.report_name_for("https://example.com/") == "analysis"


def test_parser_defaults():
    args = main.build_parser().parse_args(["render", "--name", "resume"])

    assert args.page == 1
    assert args.width == round(595 * 1.2)
    assert not args.raw


def test_render_from_raw_response(storage):
    """Test the overlay of a page is written as SVG."""
    args = argparse.Namespace(name="resume", page=1, width=714, height=1010, raw=True)

    assert main.run_render(args, storage) == 0

    path = os.path.join(storage.overlays_dir, "resume_page1.svg")
    with open(path) as f:
        svg = f.read()
    assert 'id="annotation-1"' in svg


def test_export_from_raw_response(storage):
    args = argparse.Namespace(name="resume", raw=True)

    assert main.run_export(args, storage) == 0
    assert os.path.exists(os.path.join(storage.reports_dir, "resume.csv"))


def test_missing_report_fails(storage):
    args = argparse.Namespace(name="unknown", raw=False)

    assert main.run_export(args, storage) == 1
