from crawler.link_extractor import collect_links, extract_links, resolve_href, unique_links


def test_relative_href_resolves_against_base():
    html = '<html><body><a href="/page1">Link</a></body></html>'
    assert extract_links(html, "http://example.com") == ["http://example.com/page1"]


def test_links_keep_document_order():
    html = '<a href="/link1">1</a><p>texto</p><a href="/link2">2</a>'
    assert extract_links(html, "http://example.com") == [
        "http://example.com/link1",
        "http://example.com/link2",
    ]


def test_invalid_and_empty_links_are_skipped_individually():
    html = """
        <a href="http://valid-link.com">Valid</a>
        <a href="invalid-link">Invalid</a>
        <a href="">Empty</a>
        <a href="http://valid-link-2.com">Another Valid</a>
    """
    links = extract_links(html, "http://example.com")

    assert "http://valid-link.com/" in links
    assert "http://valid-link-2.com/" in links
    assert "http://example.com/invalid-link" in links
    assert "http://valid-link.com" not in links
    assert "invalid-link" not in links
    assert "" not in links
    assert len(links) == 3


def test_relative_links_use_the_page_url_not_the_seed():
    html = '<a href="child">c</a><a href="../up">u</a>'
    links = extract_links(html, "http://example.com/docs/guide/")
    assert links == ["http://example.com/docs/guide/child", "http://example.com/docs/up"]


def test_duplicates_are_not_removed():
    html = '<a href="/a">1</a><a href="/a">2</a><a href="/b">3</a>'
    links = extract_links(html, "http://example.com")
    assert links == ["http://example.com/a", "http://example.com/a", "http://example.com/b"]
    assert unique_links(links) == ["http://example.com/a", "http://example.com/b"]


def test_malformed_hrefs_are_reported_as_skipped():
    html = '<a href="http://[::1">v6</a><a href="http://example.com:abc/">port</a><a href="/ok">ok</a><a>sin href</a>'
    links, skipped = collect_links(html, "http://example.com")
    assert links == ["http://example.com/ok"]
    assert skipped == ["http://[::1", "http://example.com:abc/"]


def test_only_anchor_tags_are_collected():
    html = '<link href="/style.css"><img src="/x.png"><A HREF="/upper">u</A>'
    assert extract_links(html, "http://example.com") == ["http://example.com/upper"]


def test_resolve_href_normalizes_host_and_drops_fragment():
    assert resolve_href("HTTP://Example.COM/Path#frag", "http://example.com") == "http://example.com/Path"
    assert resolve_href("?q=1", "http://example.com/p") == "http://example.com/p?q=1"
    assert resolve_href("   ", "http://example.com") is None


def test_non_web_schemes_are_kept_as_absolute_urls():
    assert resolve_href("mailto:someone@example.com", "http://example.com") == "mailto:someone@example.com"
