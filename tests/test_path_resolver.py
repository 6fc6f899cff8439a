import re

from app.services.path_resolver import PathResolver, build_object_path, sanitize_filename


def test_sanitize_replaces_everything_outside_safe_set():
    assert sanitize_filename("my photo (1).png") == "my_photo__1_.png"
    assert sanitize_filename("../../etc/passwd") == ".._.._etc_passwd"
    assert sanitize_filename("snímek-2.JPG") == "sn_mek-2.JPG"


def test_object_path_stays_in_namespace():
    path = build_object_path("images", 1700000000000, "a/b\\c?.png")
    assert path == "images/1700000000000-a_b_c_.png"
    namespace, name = path.split("/", 1)
    assert namespace == "images"
    assert re.fullmatch(r"[A-Za-z0-9._-]+", name)


def test_empty_name_gets_fallback():
    assert build_object_path("images", 5, "") == "images/5-image"


def test_same_name_later_differs_only_in_timestamp():
    first = build_object_path("images", 1000, "cat pic.png")
    second = build_object_path("images", 2000, "cat pic.png")
    assert first.replace("1000", "T") == second.replace("2000", "T")


def test_resolver_timestamps_strictly_increase_within_a_millisecond():
    resolver = PathResolver("images", clock=lambda: 42)
    paths = [resolver.resolve("a.png") for _ in range(3)]
    assert paths == ["images/42-a.png", "images/43-a.png", "images/44-a.png"]


def test_resolver_uses_clock_when_it_advances():
    ticks = iter([10, 50])
    resolver = PathResolver("images/", clock=lambda: next(ticks))
    assert resolver.resolve("x.png") == "images/10-x.png"
    assert resolver.resolve("x.png") == "images/50-x.png"
