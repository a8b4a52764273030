# File: tests/test_converter.py
from bs4 import BeautifulSoup

from flatten_doc.converter import ContentConverter, format_source, page_title

URL = "https://pkg.go.dev/github.com/user/repo"


def convert(html: str, url: str = URL):
    return ContentConverter().convert_page(BeautifulSoup(html, "html.parser"), url)


def test_header_and_readme():
    html = """
    <html><body><main>
      <h1 class="UnitHeader-titleHeading">repo</h1>
      <div class="UnitReadme"><h1>Repo</h1><p>Hello <strong>world</strong>.</p></div>
    </main></body></html>
    """
    md = convert(html)
    assert md.startswith(f"# Package: repo\nInput URL: {URL}\n\n")
    assert "# Repo" in md
    assert "Hello **world**." in md


def test_readme_and_documentation_are_joined_in_page_order():
    html = """
    <main>
      <div class="UnitReadme"><p>first</p></div>
      <div class="Documentation"><p>second</p></div>
    </main>
    """
    md = convert(html)
    assert md.index("first") < md.index("second")


def test_nested_sections_converted_once():
    html = """
    <main><div class="Documentation"><div class="Documentation-content"><p>only once</p></div></div></main>
    """
    assert convert(html).count("only once") == 1


def test_noise_is_removed():
    html = """
    <main><div class="Documentation">
      <div class="Documentation-index"><ul><li>func Foo()</li></ul></div>
      <script>var tracking = 1;</script>
      <style>.x { color: red }</style>
      <div class="Documentation-exampleButtonsContainer"><button>Run</button><button>Share</button></div>
      <p>Real docs.</p>
    </div></main>
    """
    md = convert(html)
    assert "Real docs." in md
    for noise in ("func Foo()", "tracking", "color: red", "Run", "Share"):
        assert noise not in md


def test_details_unwrapped_and_summary_heading():
    html = """
    <main><div class="Documentation">
      <details class="Documentation-exampleDetails">
        <summary>Example (Basic)</summary>
        <p>Example body.</p>
      </details>
    </div></main>
    """
    md = convert(html)
    assert "#### Example (Basic)" in md
    assert "Example body." in md
    assert "details" not in md


def test_page_without_sections():
    html = """
    <main><div class="UnitDirectories"><table><tr><td><a href="/x">x</a></td></tr></table></div></main>
    """
    assert convert(html) is None


def test_sections_outside_main_are_ignored_when_main_exists():
    html = """
    <div class="UnitReadme"><p>outside</p></div>
    <main><div class="Documentation"><p>inside</p></div></main>
    """
    md = convert(html)
    assert "inside" in md
    assert "outside" not in md


def test_page_title_fallbacks():
    soup = BeautifulSoup("<html><head><title> foo  - Go Packages </title></head></html>", "html.parser")
    assert page_title(soup, URL) == "foo - Go Packages"
    assert page_title(BeautifulSoup("<p></p>", "html.parser"), URL) == URL


def test_format_source():
    content = format_source("https://example.com/pkg/file.go", "package pkg")
    assert content == (
        "# Source: /pkg/file.go\nInput URL: https://example.com/pkg/file.go\n\n"
        "```go\npackage pkg\n```"
    )


def test_format_source_unknown_extension_keeps_text():
    content = format_source("https://example.com/a/b.zig", "const x = 1;\n")
    assert "```zig\nconst x = 1;\n```" in content
