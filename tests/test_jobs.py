from __future__ import annotations

from pathlib import Path

import pytest

from adocsite.jobs import (
    DocumentJob,
    extract_front_matter,
    output_path_for,
    resolve_front_matter,
    version_of,
)


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("v1.2.3/nn_socket.3.adoc", "site/v1.2.3/nn_socket.3.html"),
        ("guide/intro.adoc", "site/guide/intro.html"),
        ("index.adoc", "site/index.html"),
        ("guide/../faq.adoc", "site/faq.html"),
        ("./guide/./intro.adoc", "site/guide/intro.html"),
    ],
)
def test_output_path_mirrors_source_one_level_up(source, expected):
    assert output_path_for(source, "site/_adoc") == Path(expected)


def test_output_path_only_strips_the_source_extension():
    assert output_path_for("notes.v2.adoc", "site/_adoc") == Path("site/notes.v2.html")
    assert output_path_for("readme.txt", "site/_adoc") == Path("site/readme.html")


def test_output_path_from_current_directory_root():
    assert output_path_for("guide/intro.adoc", ".") == Path("../guide/intro.html")


@pytest.mark.parametrize(
    ("source", "version"),
    [
        ("v1.2.3/foo.adoc", "1.2.3"),
        ("v2.0/nn_bind.3.adoc", "2.0"),
        ("v1/foo.adoc", "1"),
        ("v1.1.5-rc1/sub/foo.adoc", "1.1.5-rc1"),
        ("guide/intro.adoc", None),
        ("versions/foo.adoc", None),
        ("guide/v1.0/foo.adoc", None),
        ("V1.0/foo.adoc", None),
    ],
)
def test_version_comes_from_first_segment(source, version):
    assert version_of(source) == version


def test_existing_front_matter_is_returned_verbatim():
    content = "---\nkey: value\n---\n= Title\n"
    assert extract_front_matter(content) == "---\nkey: value\n---\n"


def test_front_matter_stops_at_first_closing_delimiter():
    content = "---\ntitle: a\nlayout: b\n---\nbody\n---\nmore\n---\n"
    assert extract_front_matter(content) == "---\ntitle: a\nlayout: b\n---\n"


def test_empty_front_matter_block_is_recognised():
    assert extract_front_matter("---\n---\nbody\n") == "---\n---\n"


@pytest.mark.parametrize(
    "content",
    [
        "= Title\n\n---\nkey: value\n---\n",
        "----\nkey: value\n----\n",
        "---\nnever closed\n",
        "",
    ],
)
def test_no_front_matter_unless_at_start(content):
    assert extract_front_matter(content) is None


def test_resolve_prefers_existing_block_for_versioned_pages():
    content = "---\nlayout: manpage\n---\n= nn_socket(3)\n"
    assert resolve_front_matter(content, "1.0") == "---\nlayout: manpage\n---\n"


def test_resolve_synthesizes_block_for_versioned_pages():
    assert resolve_front_matter("= nn_bind(3)\n", "2.0") == "---\nversion: 2.0\nlayout: default\n---\n"


def test_resolve_uses_configured_layout():
    assert resolve_front_matter("body", "1.0", layout="manual") == "---\nversion: 1.0\nlayout: manual\n---\n"


def test_resolve_is_empty_for_generic_pages():
    assert resolve_front_matter("= Intro\n", None) == ""


def test_job_for_versioned_page():
    job = DocumentJob.from_source("v1.2.3/foo.adoc", "site/_adoc")

    assert job.is_versioned
    assert job.version_string == "1.2.3"
    assert job.doctype == "manpage"
    assert job.output_path == Path("site/v1.2.3/foo.html")
    assert job.converter_attributes("nanomsg") == {"version-label": "nanomsg", "revnumber": "1.2.3"}


def test_job_for_generic_page():
    job = DocumentJob.from_source("guide/intro.adoc", "site/_adoc")

    assert not job.is_versioned
    assert job.version_string is None
    assert job.doctype is None
    assert job.converter_attributes("nanomsg") == {}


def test_crlf_front_matter_is_returned_verbatim():
    content = "---\r\ntitle: Intro\r\n---\r\n= Intro\r\n"
    assert extract_front_matter(content) == "---\r\ntitle: Intro\r\n---\r\n"
