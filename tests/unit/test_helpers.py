"""
关联字段、slug 工具测试
"""
from utils.joins import first_or_none
from utils.slugs import slugify


class TestFirstOrNone:
    def test_list(self):
        assert first_or_none([1, 2]) == 1

    def test_empty_list(self):
        assert first_or_none([]) is None

    def test_object(self):
        marker = object()
        assert first_or_none(marker) is marker

    def test_none(self):
        assert first_or_none(None) is None


class TestSlugify:
    def test_basic(self):
        assert slugify("Off Topic!") == "off-topic"

    def test_accents_are_stripped(self):
        assert slugify("Café Crème") == "cafe-creme"

    def test_non_ascii_only_gives_empty(self):
        assert slugify("标签") == ""

    def test_max_length(self):
        assert slugify("a" * 200, max_length=10) == "a" * 10
