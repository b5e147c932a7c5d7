import io
import os

from hypothesis import given
from hypothesis import strategies as st

from tinyunix.coreutils import (
    DIRSIZ,
    T_DIR,
    T_FILE,
    cat,
    cat_main,
    echo,
    echo_main,
    find,
    find_main,
    fmtname,
    ls,
    ls_main,
    primes,
    primes_main,
    wc_counts,
    wc_main,
)

wc_bytes = st.binary().filter(lambda b: b"\f" not in b and b"\0" not in b)


def test_cat_concatenates():
    out = io.BytesIO()
    cat([io.BytesIO(b"abc"), io.BytesIO(b""), io.BytesIO(b"def\n")], out)
    assert out.getvalue() == b"abcdef\n"


def test_cat_main_files(tmp_path, capsysbinary):
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.write_bytes(b"hello ")
    second.write_bytes(b"world\n")
    assert cat_main([str(first), str(second)]) == 0
    assert capsysbinary.readouterr().out == b"hello world\n"


def test_cat_main_missing(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert cat_main([missing]) == 1
    assert capsys.readouterr().err == f"cat: cannot open {missing}\n"


def test_echo():
    assert echo(["a", "b", "c"]) == "a b c\n"
    assert echo([]) == ""


def test_echo_main(capsys):
    assert echo_main(["hi", "there"]) == 0
    assert capsys.readouterr().out == "hi there\n"


@given(wc_bytes)
def test_wc_invariants(data):
    counts = wc_counts(data)
    assert counts.chars == len(data)
    assert counts.lines == data.count(b"\n")
    assert counts.words == len(data.split())


def test_wc_nul_separates_words():
    assert wc_counts(b"a\0b") == wc_counts(b"a b")


def test_wc_text_equals_bytes():
    assert wc_counts("one two\nthree\n") == wc_counts(b"one two\nthree\n")


def test_wc_main(tmp_path, capsys):
    path = tmp_path / "f"
    data = b"x y\nz\n"
    path.write_bytes(data)
    assert wc_main([str(path)]) == 0
    counts = wc_counts(data)
    assert capsys.readouterr().out == f"{counts.lines} {counts.words} {counts.chars} {path}\n"


def test_wc_main_missing(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert wc_main([missing]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"


def test_fmtname_pads_short_names():
    name = fmtname("dir/sub/short")
    assert len(name) == DIRSIZ
    assert name.rstrip() == "short"


def test_fmtname_keeps_long_names():
    long_name = "n" * (DIRSIZ + 3)
    assert fmtname("a/" + long_name) == long_name
    assert fmtname("README") == "README".ljust(DIRSIZ)


def test_ls_file(tmp_path):
    path = tmp_path / "data"
    path.write_bytes(b"12345")
    (line,) = ls(str(path))
    fields = line.split()
    assert fields[0] == "data"
    assert fields[1] == str(T_FILE)
    assert fields[2] == str(os.stat(path).st_ino)
    assert fields[3] == str(os.path.getsize(path))


def test_ls_directory(tmp_path):
    (tmp_path / "b").write_bytes(b"")
    (tmp_path / "a").mkdir()
    lines = ls(str(tmp_path))
    names = [line.split()[0] for line in lines]
    assert names == [".", "..", "a", "b"]
    assert lines[2].split()[1] == str(T_DIR)
    assert lines[3].split()[1] == str(T_FILE)


def test_ls_main_missing(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert ls_main([missing]) == 0
    assert capsys.readouterr().err == f"ls: cannot open {missing}\n"


def test_find(tmp_path):
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "target").write_text("")
    (tmp_path / "a" / "b" / "target").write_text("")
    (tmp_path / "a" / "other").write_text("")
    (tmp_path / "target_dir").mkdir()
    (tmp_path / "a" / "target").mkdir()
    root = str(tmp_path)
    assert sorted(find(root, "target")) == sorted(
        [root + "/target", root + "/a/b/target"]
    )


def test_find_missing_root(tmp_path):
    assert list(find(str(tmp_path / "absent"), "x")) == []


def test_find_main_usage(capsys):
    assert find_main(["only"]) == 0
    assert capsys.readouterr().out == "find <path> <name>\n"


def test_primes_sieve():
    assert list(primes(range(2, 36))) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31]
    assert list(primes([])) == []


@given(st.integers(min_value=2, max_value=200))
def test_primes_are_pairwise_coprime(top):
    found = list(primes(range(2, top)))
    assert found == sorted(found)
    for i, p in enumerate(found):
        assert all(p % q != 0 for q in found[:i])


def test_primes_main(capsys):
    assert primes_main([]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [f"prime {p}" for p in primes(range(2, 36))]