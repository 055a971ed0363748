"""
Tests for the cool-lexicon command-line interface.
"""
import json
import logging

import pytest

from cool_lexicon.cli import create_parser, main

from conftest import SEED_WORDS


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "cool-lexicon-cfg.json"
    path.write_text(json.dumps({"type": "sqlite", "database": str(tmp_path / "words.db")}))
    return path


@pytest.fixture
def words_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("\n".join(SEED_WORDS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def seeded(config_file, words_file):
    assert main(["--cfg", str(config_file), "--check", "--if", "--ad", str(words_file)]) == 0
    return config_file


class TestParser:

    def test_defaults(self):
        args = create_parser().parse_args(["--ex", "word"])
        assert str(args.cfg) == "cool-lexicon-cfg.json"
        assert not args.check
        assert not args.input_files
        assert args.output_dir is None
        assert args.ex == "word"


class TestMain:

    def test_no_operation(self, config_file, capsys):
        assert main(["--cfg", str(config_file)]) == 1
        assert "no operation provided" in capsys.readouterr().out

    def test_missing_config(self, tmp_path, capsys):
        assert main(["--cfg", str(tmp_path / "nope.json"), "--ex", "x"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "cfg.json"
        path.write_text('{"type": "mysql", "host": "localhost"}')
        assert main(["--cfg", str(path), "--ex", "x"]) == 1
        assert "CONFIG ERROR" in capsys.readouterr().out

    def test_lookup_logged(self, seeded, caplog):
        caplog.set_level(logging.INFO, logger="cool_lexicon")
        assert main(["--cfg", str(seeded), "--ex", "नमस्ते"]) == 0
        assert "lookup result: नमस्ते : true" in caplog.text

    def test_results_written_to_files(self, seeded, tmp_path):
        out = tmp_path / "out"
        code = main([
            "--cfg", str(seeded), "--of", str(out),
            "--ss", "न", "--se", "र", "--ex", "notexists",
        ])
        assert code == 0
        assert (out / "starts_with.txt").read_text(encoding="utf-8") == (
            'न : ["नमस्कार", "नमस्ते"]\n'
        )
        assert (out / "ends_with.txt").read_text(encoding="utf-8") == (
            'र : ["नमस्कार", "सुंदर"]\n'
        )
        assert (out / "lookup.txt").read_text(encoding="utf-8") == "notexists : false\n"

    def test_file_input_for_lookup(self, seeded, words_file, tmp_path):
        out = tmp_path / "out"
        assert main(["--cfg", str(seeded), "--if", "--of", str(out), "--ex", str(words_file)]) == 0
        lines = (out / "lookup.txt").read_text(encoding="utf-8").splitlines()
        assert lines == [f"{w} : true" for w in SEED_WORDS]

    def test_failed_operation_does_not_stop_others(self, seeded, tmp_path, caplog):
        out = tmp_path / "out"
        code = main([
            "--cfg", str(seeded), "--if", "--of", str(out),
            "--ex", str(tmp_path / "missing.txt"),
            "--ss", str(tmp_path / "missing.txt"),
            "--ad", str(tmp_path / "missing.txt"),
        ])
        assert code == 1
        assert "could not read input for 'lookup'" in caplog.text
        assert "could not read input for 'add'" in caplog.text

    def test_add_single_word(self, seeded, caplog):
        caplog.set_level(logging.INFO, logger="cool_lexicon")
        assert main(["--cfg", str(seeded), "--ad", "देव"]) == 0
        assert main(["--cfg", str(seeded), "--ex", "देव"]) == 0
        assert "lookup result: देव : true" in caplog.text

    def test_unwritable_output_does_not_stop_others(self, seeded, tmp_path, caplog):
        blocker = tmp_path / "out"
        blocker.write_text("not a folder")
        code = main([
            "--cfg", str(seeded), "--of", str(blocker),
            "--ex", "नमस्ते", "--ad", "देव",
        ])
        assert code == 1
        assert "could not write output of 'lookup'" in caplog.text

        caplog.set_level(logging.INFO, logger="cool_lexicon")
        assert main(["--cfg", str(seeded), "--ex", "देव"]) == 0
        assert "lookup result: देव : true" in caplog.text
