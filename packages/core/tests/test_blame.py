"""Tests for BlameIndex."""

from linthawk_core.blame import BlameIndex


def test_build_indexes_each_path(fake_git):
    cmd = fake_git(
        blames={
            "a.yml": [("c1", 1, "x"), ("c2", 2, "y")],
            "b.yml": [("c3", 1, "z")],
        }
    )
    index = BlameIndex.build(["a.yml", "b.yml"], cmd)
    assert index.resolve("a.yml") == {1: "c1", 2: "c2"}
    assert index.commit("b.yml", 1) == "c3"


def test_build_blames_each_distinct_path_once(fake_git):
    cmd = fake_git(blames={"a.yml": [("c1", 1, "x")]})
    BlameIndex.build(["a.yml", "a.yml", "a.yml"], cmd)
    assert [c for c in cmd.calls if c[0] == "blame"] == [("blame", "--line-porcelain", "--", "a.yml")]


def test_failed_blame_yields_empty_mapping(fake_git):
    cmd = fake_git(blames={"ok.yml": [("c1", 1, "x")]}, failing={"gone.yml"})
    index = BlameIndex.build(["ok.yml", "gone.yml"], cmd)
    assert index.resolve("gone.yml") == {}
    assert index.commit("gone.yml", 1) is None
    assert index.commit("ok.yml", 1) == "c1"


def test_unknown_path_and_line_resolve_to_none():
    index = BlameIndex({"a.yml": {1: "c1"}})
    assert index.commit("a.yml", 2) is None
    assert index.commit("other.yml", 1) is None
    assert index.resolve("other.yml") == {}


def test_resolve_returns_a_copy():
    index = BlameIndex({"a.yml": {1: "c1"}})
    index.resolve("a.yml")[1] = "tampered"
    assert index.commit("a.yml", 1) == "c1"


def test_build_with_no_paths_does_not_call_git(fake_git):
    cmd = fake_git()
    index = BlameIndex.build([], cmd)
    assert index.paths() == []
    assert cmd.calls == []


def test_parallel_build_matches_sequential(fake_git):
    blames = {f"f{i}.yml": [(f"c{i}", 1, "x"), ("shared", 2, "y")] for i in range(8)}
    paths = list(blames)
    serial = BlameIndex.build(paths, fake_git(blames=blames), max_workers=1)
    parallel = BlameIndex.build(paths, fake_git(blames=blames), max_workers=8)
    assert all(serial.resolve(p) == parallel.resolve(p) for p in paths)


def test_unexpected_runner_error_yields_empty_mapping(blame_text):
    def cmd(*args):
        if args[-1] == "locked.yml":
            raise OSError("permission denied")
        return blame_text("c1", 1, args[-1], "x").encode()

    index = BlameIndex.build(["locked.yml", "ok.yml"], cmd)
    assert index.resolve("locked.yml") == {}
    assert index.commit("ok.yml", 1) == "c1"
