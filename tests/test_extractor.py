"""Tests for URL extraction and the full-size transform."""

from imagelocalizer.extractor import extract_image_urls, resolve_full_size, unique_urls


class TestExtractImageUrls:
    """Tests for extract_image_urls."""

    def test_finds_quoted_urls_in_order(self):
        """Test that matches come back in document order without quotes."""
        text = (
            '<img src="http://example.com/a.jpg"> and '
            '[![x](b.png)](x) <a href="https://example.com/b.jpg">'
        )
        assert extract_image_urls(text) == [
            "http://example.com/a.jpg",
            "https://example.com/b.jpg",
        ]

    def test_keeps_duplicates(self):
        """Test that repeated URLs are all reported."""
        text = '"http://example.com/a.jpg" "http://example.com/a.jpg"'
        assert extract_image_urls(text) == ["http://example.com/a.jpg"] * 2

    def test_case_insensitive(self):
        """Test that scheme and extension are matched case-insensitively."""
        text = '"HTTP://Example.com/Photo.JPG"'
        assert extract_image_urls(text) == ["HTTP://Example.com/Photo.JPG"]

    def test_ignores_unquoted_and_other_extensions(self):
        """Test that only double-quoted .jpg URLs match."""
        text = (
            "http://example.com/bare.jpg "
            "'http://example.com/single.jpg' "
            '"http://example.com/pic.png" '
            '"ftp://example.com/pic.jpg"'
        )
        assert extract_image_urls(text) == []

    def test_jpg_must_close_the_quote(self):
        """Test that a .jpg in the middle of a quoted string does not match."""
        assert extract_image_urls('"http://example.com/a.jpg?size=large"') == []

    def test_empty_text(self):
        """Test that empty text yields nothing."""
        assert extract_image_urls("") == []


class TestUniqueUrls:
    """Tests for unique_urls."""

    def test_first_seen_wins(self):
        """Test that order follows first occurrence."""
        urls = ["b", "a", "b", "c", "a"]
        assert unique_urls(urls) == ["b", "a", "c"]


class TestResolveFullSize:
    """Tests for resolve_full_size."""

    def test_replaces_size_segment(self):
        """Test the common Blogger-style size segment."""
        url = "http://bp.blogspot.com/abc/s220/foo.jpg"
        assert resolve_full_size(url) == "http://bp.blogspot.com/abc/s3200/foo.jpg"

    def test_replaces_height_variant(self):
        """Test that the -h suffix is consumed too."""
        url = "http://bp.blogspot.com/abc/s400-h/foo.jpg"
        assert resolve_full_size(url) == "http://bp.blogspot.com/abc/s3200/foo.jpg"

    def test_case_insensitive(self):
        """Test an upper-case size segment."""
        url = "http://bp.blogspot.com/abc/S640/foo.jpg"
        assert resolve_full_size(url) == "http://bp.blogspot.com/abc/s3200/foo.jpg"

    def test_without_segment_unchanged(self):
        """Test that URLs without a size segment are returned as is."""
        url = "http://example.com/photos/foo.jpg"
        assert resolve_full_size(url) == url

    def test_only_first_segment_replaced(self):
        """Test the single-substitution policy."""
        url = "http://example.com/s100/x/s200/foo.jpg"
        assert resolve_full_size(url) == "http://example.com/s3200/x/s200/foo.jpg"

    def test_custom_segment(self):
        """Test substituting a different target size."""
        url = "http://example.com/s100/foo.jpg"
        assert resolve_full_size(url, "/s1600") == "http://example.com/s1600/foo.jpg"
