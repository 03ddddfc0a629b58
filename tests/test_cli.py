"""Tests for the nl2dmn command line."""

import pytest
from nl_to_dmn import __version__
from nl_to_dmn.cli import build_parser, main


@pytest.fixture
def rules_file(tmp_path, order_rules_text):
    path = tmp_path / "order-rules.txt"
    path.write_text(order_rules_text)
    return path


class TestConvertCommand:
    def test_default_output_path(self, rules_file):
        assert main(["convert", str(rules_file)]) == 0

        output = rules_file.with_suffix(".dmn")
        content = output.read_text()
        assert 'name="order rules"' in content
        assert 'id="definitions_order-rules"' in content

    def test_explicit_output_and_names(self, tmp_path, rules_file):
        output = tmp_path / "out" / "orders.dmn"
        code = main([
            "convert", str(rules_file), "-o", str(output),
            "--name", "Order Processing", "--id", "order_processing",
        ])

        assert code == 0
        content = output.read_text()
        assert 'name="Order Processing"' in content
        assert 'id="definitions_order_processing"' in content
        assert content.count("<rule id=") == 6

    def test_max_rules_splits_output(self, tmp_path, rules_file):
        output = tmp_path / "orders.dmn"
        assert main(["convert", str(rules_file), "-o", str(output), "--max-rules", "4"]) == 0

        assert not output.exists()
        assert (tmp_path / "orders_part1.dmn").exists()
        assert (tmp_path / "orders_part2.dmn").exists()

    def test_excel_view(self, tmp_path, rules_file):
        excel = tmp_path / "orders.xlsx"
        assert main(["convert", str(rules_file), "--excel", str(excel)]) == 0
        assert excel.exists()

    def test_no_rules(self, tmp_path, caplog):
        path = tmp_path / "empty.txt"
        path.write_text("# nothing\nnot a rule\n")

        assert main(["convert", str(path)]) == 1
        assert "No valid rules found" in caplog.text
        assert not path.with_suffix(".dmn").exists()

    def test_missing_input(self, tmp_path):
        assert main(["convert", str(tmp_path / "missing.txt")]) == 1


class TestBatchCommand:
    def test_converts_directory(self, tmp_path, order_rules_text, capsys):
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        (input_dir / "a.txt").write_text(order_rules_text)
        (input_dir / "b.txt").write_text("If a is 1, b is 2\n")
        output_dir = tmp_path / "out"

        code = main(["batch", str(input_dir), str(output_dir), "--threads", "2"])

        assert code == 0
        assert (output_dir / "a.dmn").exists()
        assert (output_dir / "b.dmn").exists()
        assert "BATCH PROCESSING SUMMARY" in capsys.readouterr().out

    def test_failure_sets_exit_code(self, tmp_path, capsys):
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        (input_dir / "bad.txt").write_text("not a rule\n")

        assert main(["batch", str(input_dir), str(tmp_path / "out")]) == 1
        assert "bad.txt: No valid rules found" in capsys.readouterr().out

    def test_missing_directory(self, tmp_path):
        assert main(["batch", str(tmp_path / "missing")]) == 1

    def test_empty_directory(self, tmp_path):
        assert main(["batch", str(tmp_path), str(tmp_path / "out")]) == 1


class TestGenerateCommand:
    def test_generates_files(self, tmp_path, capsys):
        output_dir = tmp_path / "rules"
        code = main(["generate", str(output_dir), "--files", "3", "--rules", "5", "--seed", "1"])

        assert code == 0
        assert len(list(output_dir.glob("rules_*.txt"))) == 3
        assert f"Generated 3 rule files in {output_dir}/" in capsys.readouterr().out

    def test_generated_files_convert(self, tmp_path):
        rules_dir = tmp_path / "rules"
        main(["generate", str(rules_dir), "--files", "2", "--seed", "4"])
        assert main(["batch", str(rules_dir), str(tmp_path / "out")]) == 0


class TestParser:
    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])
        assert __version__ in capsys.readouterr().out

    def test_batch_defaults(self):
        args = build_parser().parse_args(["batch", "in"])
        assert str(args.output_dir) == "dmn-output"
        assert args.max_rules == 1000
        assert not args.no_validate
