"""Unit tests for the site generator and page parser."""

import json
from io import StringIO
from pathlib import Path

import pytest

from quire_core.config import BuildConfig, QuireConfig, TemplateConfig
from quire_core.errors import QuireError
from quire_core.logging import LogConfig
from quire_core.site import FrontmatterParser, ParsedPage, SiteGenerator, page_depth


@pytest.fixture
def site(tmp_path: Path) -> QuireConfig:
    """Config with pages, templates and output under tmp_path."""
    templates = tmp_path / "templates"
    (templates / "partials").mkdir(parents=True)
    (templates / "default.html").write_text(
        '<title>{{name}} | {{title}}</title><link href="{{@assetPath \'style.css\'}}">'
        "<main>{{{content}}}</main>",
        encoding="utf-8",
    )
    (templates / "post.html").write_text(
        "<article>{{title}}{{@each tags}}#{{this}}{{/each}}</article>",
        encoding="utf-8",
    )
    pages = tmp_path / "md"
    pages.mkdir()

    return QuireConfig(
        templates=TemplateConfig(templates_dir=str(templates)),
        build=BuildConfig(
            pages_dir=str(pages),
            output_dir=str(tmp_path / "public"),
            site={"name": "Quire", "author": {"name": "Ada", "email": "ada@example.com"}},
        ),
    )


def write_page(config: QuireConfig, name: str, text: str) -> Path:
    path = Path(config.build.pages_dir) / name
    path.write_text(text, encoding="utf-8")
    return path


class TestFrontmatterParser:
    """Tests for FrontmatterParser."""

    def test_frontmatter_and_body(self):
        page = FrontmatterParser().parse_text("---\ntitle: Hello\ntags: [a, b]\n---\n<p>Body</p>\n")
        assert page.data == {"title": "Hello", "tags": ["a", "b"]}
        assert page.content == "<p>Body</p>\n"

    def test_no_frontmatter(self):
        page = FrontmatterParser().parse_text("<p>Only body</p>")
        assert page == ParsedPage(data={}, content="<p>Only body</p>")

    def test_empty_frontmatter(self):
        page = FrontmatterParser().parse_text("---\n\n---\nbody")
        assert page.data == {}
        assert page.content == "body"

    def test_invalid_yaml(self):
        with pytest.raises(QuireError) as exc_info:
            FrontmatterParser().parse_text("---\ntitle: [oops\n---\nbody", source="bad.md")
        assert exc_info.value.code == "PAGE_PARSE_ERROR"
        assert exc_info.value.template == "bad.md"

    def test_non_mapping_frontmatter(self):
        with pytest.raises(QuireError):
            FrontmatterParser().parse_text("---\n- a\n---\nbody")

    def test_missing_file(self, tmp_path):
        with pytest.raises(QuireError) as exc_info:
            FrontmatterParser().parse(tmp_path / "absent.md")
        assert exc_info.value.code == "PAGE_PARSE_ERROR"


class TestPageDepth:
    """Tests for page_depth."""

    @pytest.mark.parametrize(
        ("output_name", "expected"),
        [("index.html", 0), ("about/index.html", 1), ("blog/2024/index.html", 2)],
    )
    def test_depth(self, output_name, expected):
        assert page_depth(output_name) == expected


class TestSiteGenerator:
    """Tests for SiteGenerator."""

    def test_build_page_default_layout(self, site):
        write_page(site, "index.md", "---\ntitle: Home\n---\n<p>Welcome</p>")

        result = SiteGenerator(site).build_page("index.md")

        assert result.layout == "default"
        assert result.output.read_text(encoding="utf-8") == (
            '<title>Quire | Home</title><link href="./style.css"><main><p>Welcome</p></main>'
        )

    def test_build_page_theme_layout(self, site):
        write_page(site, "post.md", "---\ntitle: Post\ntheme: post\ntags: [x, y]\n---\n")

        result = SiteGenerator(site).build_page("post.md", "post/index.html")

        assert result.layout == "post"
        assert result.output == Path(site.build.output_dir) / "post" / "index.html"
        assert result.output.read_text(encoding="utf-8") == "<article>Post#x#y</article>"

    def test_nested_output_uses_depth(self, site):
        write_page(site, "about.md", "---\ntitle: About\n---\n")
        result = SiteGenerator(site).build_page("about.md", "about/index.html")
        assert 'href="../style.css"' in result.output.read_text(encoding="utf-8")

    def test_page_data_deep_merges_site(self, site):
        (Path(site.templates.templates_dir) / "default.html").write_text(
            "{{author.name}} <{{author.email}}>", encoding="utf-8"
        )
        write_page(site, "index.md", "---\nauthor:\n  name: Grace\n---\n")
        result = SiteGenerator(site).build_page("index.md")
        assert result.output.read_text(encoding="utf-8") == "Grace <ada@example.com>"

    def test_missing_layout(self, site):
        write_page(site, "index.md", "---\ntheme: nope\n---\n")
        with pytest.raises(QuireError) as exc_info:
            SiteGenerator(site).build_page("index.md")
        assert exc_info.value.code == "TEMPLATE_NOT_FOUND"

    def test_diagnostics_reported(self, site):
        write_page(site, "index.md", "body")
        result = SiteGenerator(site).build_page("index.md")
        assert [d.code for d in result.diagnostics] == ["VARIABLE_UNRESOLVED"]
        assert result.diagnostics[0].path == "title"

    def test_strict_build_raises(self, site):
        site.templates.strict = True
        write_page(site, "index.md", "---\ntitle: T\ntheme: strict\n---\n")
        (Path(site.templates.templates_dir) / "strict.html").write_text(
            "{{@partial 'gone'}}", encoding="utf-8"
        )
        with pytest.raises(QuireError) as exc_info:
            SiteGenerator(site).build_page("index.md")
        assert exc_info.value.code == "PARTIAL_NOT_FOUND"

    def test_build_all(self, site):
        write_page(site, "index.md", "---\ntitle: Home\n---\n")
        write_page(site, "about.md", "---\ntitle: About\n---\n")
        write_page(site, "notes.txt", "ignored")

        results = SiteGenerator(site).build_all()

        output_dir = Path(site.build.output_dir)
        assert [r.output for r in results] == [
            output_dir / "about" / "index.html",
            output_dir / "index.html",
        ]
        assert "Quire | About" in (output_dir / "about" / "index.html").read_text(encoding="utf-8")

    def test_build_all_without_pages(self, site):
        assert SiteGenerator(site).build_all() == []

    def test_build_all_missing_pages_dir(self, site, tmp_path):
        site.build.pages_dir = str(tmp_path / "nowhere")
        assert SiteGenerator(site).build_all() == []

    def test_config_logging_applied(self, site):
        stream = StringIO()
        site.logging = LogConfig(output=stream)
        write_page(site, "index.md", "---\ntitle: Home\n---\n")
        SiteGenerator(site).build_page("index.md")
        messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
        assert "Building page" in messages
        assert "HTML written" in messages
