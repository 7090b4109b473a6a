"""
CLI tests: output formats, option wiring and exit codes.
"""
import hashlib
import io
import logging
import os
import sys

import pytest
from twinfinder.cli import CLIApplication, DEFAULT_HEADER_FORMAT, main


def run_cli(argv, stdin_text=""):
    out = io.StringIO()
    app = CLIApplication(stdout=out, stdin=io.StringIO(stdin_text))
    code = app.run(argv)
    return code, out.getvalue()


class TestClusterOutput:
    def test_default_header_and_paths(self, test_files):
        a, b = str(test_files["hello_a"]), str(test_files["hello_b"])
        digest = hashlib.sha1(b"hello world!").hexdigest()

        code, output = run_cli([a, b, str(test_files["longer"])])

        assert code == 0
        assert output.splitlines() == [
            f"2 files in cluster 1 (12 bytes, digest {digest})",
            a,
            b,
        ]

    def test_no_duplicates_prints_nothing(self, test_files):
        code, output = run_cli([str(test_files["hello_a"]), str(test_files["other_12"])])
        assert code == 0
        assert output == ""

    def test_clusters_are_numbered(self, test_files):
        paths = [str(p) for p in test_files.values()]
        _, output = run_cli(["-f", "#%i:%n:%s", *paths])

        headers = [line for line in output.splitlines() if line.startswith("#")]
        assert headers == ["#1:2:12", "#2:2:0"]

    def test_excess_mode_omits_first_file_and_headers(self, test_files):
        a, b = str(test_files["hello_a"]), str(test_files["hello_b"])
        _, output = run_cli(["-e", a, b])
        assert output == f"{b}\n"

    def test_null_separated_output(self, test_files):
        a, b = str(test_files["hello_a"]), str(test_files["hello_b"])
        _, output = run_cli(["-0", a, b])
        assert output == f"{a}\0{b}\0\0"

    def test_digest_option(self, test_files):
        a, b = str(test_files["hello_a"]), str(test_files["hello_b"])
        _, output = run_cli(["-d", "sha256", "-f", "%d", a, b])
        assert output.splitlines()[0] == hashlib.sha256(b"hello world!").hexdigest()

    def test_thorough_option(self, test_files):
        a, b = str(test_files["hello_a"]), str(test_files["hello_b"])
        _, output = run_cli(["-t", "-e", a, b])
        assert output == f"{b}\n"


class TestInputs:
    def test_paths_read_from_stdin(self, test_files):
        a, b = str(test_files["hello_a"]), str(test_files["hello_b"])
        _, output = run_cli(["-e"], stdin_text=f"{a}\n{b}\n\n")
        assert output == f"{b}\n"

    def test_null_separated_stdin(self, test_files):
        a, b = str(test_files["hello_a"]), str(test_files["hello_b"])
        _, output = run_cli(["-0", "-e"], stdin_text=f"{a}\0{b}\0")
        assert output == f"{b}\0\0"

    @pytest.mark.skipif(sys.platform != "linux", reason="needs arbitrary byte file names")
    def test_undecodable_file_names(self, tmp_path):
        root = os.fsencode(tmp_path / "raw")
        os.mkdir(root)
        for name in (b"\xff1.txt", b"\xff2.txt"):
            with open(os.path.join(root, name), "wb") as f:
                f.write(b"same bytes")
        buffer = io.BytesIO()
        out = io.TextIOWrapper(buffer, encoding="utf-8")

        code = CLIApplication(stdout=out, stdin=io.StringIO()).run(["-r", "-e", os.fsdecode(root)])

        assert code == 0
        assert buffer.getvalue() == os.path.join(root, b"\xff2.txt") + b"\n"

    def test_recursive_scan(self, make_file, tmp_path):
        make_file("photos/one.jpg", b"same bytes")
        make_file("photos/nested/two.jpg", b"same bytes")
        make_file("photos/.cache/three.jpg", b"same bytes")

        _, plain = run_cli(["-r", "-f", "%n", str(tmp_path / "photos")])
        _, with_hidden = run_cli(["-ra", "-f", "%n", str(tmp_path / "photos")])

        assert plain.splitlines()[0] == "2"
        assert with_hidden.splitlines()[0] == "3"

    def test_no_empty_option(self, test_files):
        a, b = str(test_files["empty_a"]), str(test_files["empty_b"])
        _, with_empty = run_cli([a, b])
        _, without_empty = run_cli(["-z", a, b])

        assert with_empty != ""
        assert without_empty == ""


class TestWarningsAndExitCodes:
    def test_unreadable_file_warns_but_succeeds(self, tmp_path, test_files, caplog):
        missing = str(tmp_path / "missing.txt")
        with caplog.at_level(logging.WARNING):
            code, _ = run_cli([missing, str(test_files["hello_a"])])
        assert code == 0
        assert any(m.startswith(missing) for m in caplog.messages)

    def test_quiet_suppresses_warnings(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            run_cli(["-q", str(tmp_path / "missing.txt")])
        assert caplog.messages == []

    def test_quiet_and_verbose_conflict(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            run_cli(["-q", "-v"])
        assert excinfo.value.code == 1
        assert "cannot be used together" in capsys.readouterr().err

    def test_unknown_digest_is_argparse_error(self):
        with pytest.raises(SystemExit) as excinfo:
            CLIApplication.parse_args(["-d", "md4", "x"])
        assert excinfo.value.code == 2

    def test_main_exits_zero(self, test_files, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["-e", str(test_files["hello_a"]), str(test_files["hello_b"])])
        assert excinfo.value.code == 0
        assert capsys.readouterr().out == f"{test_files['hello_b']}\n"

    def test_verbose_prints_summary(self, test_files, capsys):
        run_cli(["-v", str(test_files["hello_a"]), str(test_files["hello_b"])])
        assert "2 files in 1 clusters" in capsys.readouterr().err

    def test_help_renders(self, capsys):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args(["--help"])
        help_text = capsys.readouterr().out
        assert "%n  number of files" in help_text
        assert DEFAULT_HEADER_FORMAT in help_text

    def test_help_lists_digest_names(self, capsys):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args(["--help"])
        help_text = capsys.readouterr().out
        assert "SHA-1" in help_text
        assert "xxHash64" in help_text
