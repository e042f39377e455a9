"""
Tests for the Python package format handler and its Simple API routing.
"""

import json
import unittest
from unittest import TestCase

from keeper.domain.errors import (
    EmptyInputError,
    EmptyPathError,
    ExtensionMismatchError,
    MalformedNameError,
)
from keeper.domain.models import Metadata, RepoContext, RepoRequest
from keeper.formats.pypi import PypiFormatHandler
from keeper.formats.pypi.filenames import normalize_name, parse_filename
from keeper.formats.pypi.render import (
    CONTENT_TYPE_HTML,
    CONTENT_TYPE_SIMPLE_HTML,
    CONTENT_TYPE_SIMPLE_JSON,
    negotiate_content_type,
)

ZIP_BYTES = b"PK\x03\x04" + b"\x00" * 16
GZIP_BYTES = b"\x1f\x8b\x08" + b"\x00" * 16

CTX = RepoContext(
    repo_key="pypi-local",
    base_url="http://repo.test/repositories/pypi/pypi-local",
    download_base_url="http://repo.test/download",
)


def artifact(path: str, checksum: str | None = None, size: int = 1024) -> Metadata:
    return Metadata(
        path=path,
        content_type="application/zip",
        size_bytes=size,
        checksum_sha256=checksum,
    )


class NormalizeNameTestCase(TestCase):
    def test_examples(self):
        self.assertEqual(normalize_name("requests"), "requests")
        self.assertEqual(normalize_name("My_Package"), "my-package")
        self.assertEqual(normalize_name("some.package"), "some-package")
        self.assertEqual(normalize_name("Package__Name"), "package-name")
        self.assertEqual(normalize_name("My.Cool_Package"), "my-cool-package")
        self.assertEqual(normalize_name("_leading_"), "leading")
        self.assertEqual(normalize_name("a -_. b"), "a-b")

    def test_idempotent(self):
        for name in ["Foo.Bar", "--x--", "ZOPE.interface", "a__b..c", "", "___"]:
            once = normalize_name(name)
            self.assertEqual(normalize_name(once), once)
            self.assertRegex(once, r"^([a-z0-9]+(-[a-z0-9]+)*)?$")


class FilenameGrammarTestCase(TestCase):
    def test_wheel(self):
        info = parse_filename("requests-2.28.0-py3-none-any.whl")
        self.assertEqual(info.name, "requests")
        self.assertEqual(info.version, "2.28.0")

    def test_wheel_with_build_tag(self):
        info = parse_filename("package-1.0.0-1-cp39-cp39-manylinux1_x86_64.whl")
        self.assertEqual(info.version, "1.0.0")

    def test_wheel_round_trip(self):
        for name, version in [("numpy", "1.24.2"), ("My_Pkg", "0.1.dev3")]:
            info = parse_filename(f"{name}-{version}-py3-none-any.whl")
            self.assertEqual((info.name, info.version), (name, version))

    def test_sdist_splits_on_last_hyphen(self):
        info = parse_filename("my-cool-package-1.0.0.tar.gz")
        self.assertEqual(info.name, "my-cool-package")
        self.assertEqual(info.version, "1.0.0")
        self.assertEqual(parse_filename("my-package-1.0.0.zip").version, "1.0.0")

    def test_unknown_shapes(self):
        self.assertIsNone(parse_filename("noversion.tar.gz").name)
        self.assertIsNone(parse_filename("thing.rpm").version)


class ParseMetadataTestCase(TestCase):
    def setUp(self):
        self.handler = PypiFormatHandler()

    def test_format_key(self):
        self.assertEqual(self.handler.format_key(), "pypi")
        self.assertTrue(self.handler.supports_routing)

    def test_wheel(self):
        meta = self.handler.parse_metadata(
            "packages/requests/2.28.0/requests-2.28.0-py3-none-any.whl", ZIP_BYTES
        )
        self.assertEqual(meta.content_type, "application/zip")
        self.assertEqual(meta.version, "2.28.0")
        self.assertEqual(meta.size_bytes, len(ZIP_BYTES))
        self.assertIsNone(meta.checksum_sha256)

    def test_sdist(self):
        meta = self.handler.parse_metadata("requests-2.28.0.tar.gz", GZIP_BYTES)
        self.assertEqual(meta.content_type, "application/gzip")
        self.assertEqual(meta.version, "2.28.0")

    def test_unknown_bytes_are_not_an_error(self):
        meta = self.handler.parse_metadata("weird", b"hello")
        self.assertEqual(meta.content_type, "application/octet-stream")
        self.assertIsNone(meta.version)

    def test_empty(self):
        with self.assertRaises(EmptyInputError):
            self.handler.parse_metadata("test.whl", b"")


class ValidateTestCase(TestCase):
    def setUp(self):
        self.handler = PypiFormatHandler()

    def test_accepts(self):
        self.handler.validate("requests-2.28.0-py3-none-any.whl", ZIP_BYTES)
        self.handler.validate("requests-2.28.0.tar.gz", GZIP_BYTES)
        self.handler.validate("dist/Requests-2.28.0.ZIP", ZIP_BYTES)

    def test_rejects_empty_data(self):
        with self.assertRaisesRegex(EmptyInputError, "empty"):
            self.handler.validate("test.whl", b"")

    def test_empty_data_checked_before_path(self):
        with self.assertRaises(EmptyInputError):
            self.handler.validate("", b"")

    def test_rejects_empty_path(self):
        with self.assertRaisesRegex(EmptyPathError, "path"):
            self.handler.validate("", b"\x00")

    def test_rejects_wrong_extension(self):
        with self.assertRaisesRegex(ExtensionMismatchError, r"\.whl"):
            self.handler.validate("test.rpm", b"\x00")

    def test_rejects_short_wheel_name(self):
        with self.assertRaisesRegex(MalformedNameError, "5 dash-separated"):
            self.handler.validate("bad-name.whl", b"PK")

    def test_rejects_sdist_without_version(self):
        with self.assertRaisesRegex(MalformedNameError, "name-version"):
            self.handler.validate("noversion.tar.gz", b"\x1f\x8b")


class GenerateIndexTestCase(TestCase):
    def setUp(self):
        self.handler = PypiFormatHandler()

    def test_empty(self):
        self.assertIsNone(self.handler.generate_index([]))

    def test_html_and_json(self):
        artifacts = [
            artifact("packages/requests/2.28.0/requests-2.28.0-py3-none-any.whl", size=2048),
            artifact("packages/numpy/1.24.2/numpy-1.24.2.tar.gz", size=4096),
            artifact("packages/requests/2.28.0/requests-2.28.0.tar.gz", size=10),
        ]
        documents = self.handler.generate_index(artifacts)
        self.assertEqual([name for name, _ in documents], ["simple/index.html", "pypi-index.json"])

        html = documents[0][1].decode()
        self.assertIn('<a href="/simple/numpy/">numpy</a>', html)
        self.assertEqual(html.count('href="/simple/requests/"'), 1)
        self.assertLess(html.index("numpy"), html.index("requests"))

        catalog = json.loads(documents[1][1])
        self.assertEqual(catalog["format"], "pypi")
        self.assertEqual(catalog["total_count"], 3)
        self.assertEqual(catalog["total_size_bytes"], 6154)
        self.assertEqual([p["name"] for p in catalog["packages"]], ["numpy", "requests", "requests"])
        self.assertNotIn("version", catalog["packages"][0])

    def test_normalizes_names(self):
        documents = self.handler.generate_index(
            [artifact("packages/My_Package-1.0.0-py3-none-any.whl")]
        )
        self.assertIn("my-package", documents[0][1].decode())

    def test_stable_across_input_order(self):
        artifacts = [artifact("b-1.0.tar.gz"), artifact("a-1.0.tar.gz"), artifact("A-2.0.zip")]
        first = self.handler.generate_index(artifacts)
        second = self.handler.generate_index(list(reversed(artifacts)))
        self.assertEqual(first, second)


class SimpleRoutingTestCase(TestCase):
    def setUp(self):
        self.handler = PypiFormatHandler()
        self.artifacts = [
            artifact("requests/requests-2.28.0-py3-none-any.whl", "abc123"),
            artifact("requests/requests-2.28.0.tar.gz", "def456"),
            artifact("flask/Flask-2.3.0-py3-none-any.whl"),
        ]

    def request(self, path: str, method: str = "GET", **kwargs):
        return self.handler.handle_request(
            RepoRequest(method=method, path=path, **kwargs), CTX, self.artifacts
        )

    def test_root_index(self):
        for path in ("/", "/simple", "/simple/"):
            response = self.request(path)
            self.assertEqual(response.status, 200)
            self.assertEqual(response.headers["content-type"], CONTENT_TYPE_HTML)
            body = response.body.decode()
            self.assertIn(f'href="{CTX.base_url}/simple/flask/"', body)
            self.assertIn(f'href="{CTX.base_url}/simple/requests/"', body)

    def test_project_page(self):
        response = self.request("/simple/requests/")
        self.assertEqual(response.status, 200)
        body = response.body.decode()
        self.assertIn("requests-2.28.0-py3-none-any.whl", body)
        self.assertIn("requests-2.28.0.tar.gz", body)
        self.assertIn(
            f'href="{CTX.base_url}/packages/requests-2.28.0-py3-none-any.whl#sha256=abc123"',
            body,
        )
        self.assertIn(
            f'href="{CTX.base_url}/packages/requests-2.28.0.tar.gz#sha256=def456"', body
        )
        self.assertNotIn("flask", body.lower())

    def test_project_name_is_normalized(self):
        response = self.request("/simple/FLASK/")
        self.assertEqual(response.status, 200)
        body = response.body.decode()
        self.assertIn("<title>Links for flask</title>", body)
        self.assertIn("Flask-2.3.0-py3-none-any.whl", body)
        self.assertNotIn("#sha256=", body)

    def test_unknown_project(self):
        response = self.request("/simple/django/")
        self.assertEqual(response.status, 404)
        self.assertIn(b"django", response.body)

    def test_project_page_json(self):
        response = self.request(
            "/simple/requests/",
            headers={"Accept": "application/vnd.pypi.simple.v1+json"},
        )
        self.assertEqual(response.headers["content-type"], CONTENT_TYPE_SIMPLE_JSON)
        page = json.loads(response.body)
        self.assertEqual(page["name"], "requests")
        self.assertEqual(page["meta"], {"api-version": "1.0"})
        self.assertEqual(
            {f["filename"]: f["hashes"] for f in page["files"]},
            {
                "requests-2.28.0-py3-none-any.whl": {"sha256": "abc123"},
                "requests-2.28.0.tar.gz": {"sha256": "def456"},
            },
        )

    def test_root_index_json_via_query(self):
        response = self.request("/simple/", query={"format": "json"})
        page = json.loads(response.body)
        self.assertEqual([p["name"] for p in page["projects"]], ["flask", "requests"])

    def test_download_redirect(self):
        response = self.request("/packages/requests-2.28.0.tar.gz")
        self.assertEqual(response.status, 302)
        self.assertEqual(
            response.headers["location"],
            "http://repo.test/download/requests/requests-2.28.0.tar.gz",
        )
        self.assertEqual(response.body, b"")

    def test_download_matches_exact_filename(self):
        response = self.request("/packages/flask-2.3.0-py3-none-any.whl")
        self.assertEqual(response.status, 404)
        self.assertIn(b"flask-2.3.0-py3-none-any.whl", response.body)

    def test_other_paths(self):
        for path in ("/simple/requests", "/simple/a/b/", "/packages/", "/packages/a/b", "/nope"):
            response = self.request(path)
            self.assertEqual(response.status, 404, path)
            self.assertEqual(response.body, b"Not Found")

    def test_method_not_allowed(self):
        for method in ("POST", "PUT", "DELETE"):
            response = self.request("/simple/", method=method)
            self.assertEqual(response.status, 405)
            self.assertEqual(response.headers["allow"], "GET, HEAD")
            self.assertTrue(response.headers["content-type"].startswith("text/plain"))

    def test_head_has_no_body(self):
        response = self.request("/simple/requests/", method="HEAD")
        self.assertEqual(response.status, 200)
        self.assertEqual(response.body, b"")
        self.assertEqual(response.headers["content-type"], CONTENT_TYPE_HTML)


class NegotiationTestCase(TestCase):
    def test_defaults_to_html(self):
        self.assertEqual(negotiate_content_type(None), CONTENT_TYPE_HTML)
        self.assertEqual(negotiate_content_type("*/*"), CONTENT_TYPE_HTML)

    def test_quality_values(self):
        accept = (
            "application/vnd.pypi.simple.v1+json;q=0.2, "
            "application/vnd.pypi.simple.v1+html;q=0.9"
        )
        self.assertEqual(negotiate_content_type(accept), CONTENT_TYPE_SIMPLE_HTML)

    def test_zero_quality_is_ignored(self):
        accept = "application/vnd.pypi.simple.v1+json;q=0, text/html;q=0.1"
        self.assertEqual(negotiate_content_type(accept), CONTENT_TYPE_HTML)

    def test_format_parameter_wins(self):
        self.assertEqual(
            negotiate_content_type("text/html", format="JSON"), CONTENT_TYPE_SIMPLE_JSON
        )


if __name__ == "__main__":
    unittest.main()
