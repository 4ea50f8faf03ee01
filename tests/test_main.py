import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import main


class TestMain:
    def test_prints_report(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,1.5000,0.0000,1.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        )
        assert "Applied: 4, Ignored: 1" in captured.err

    def test_usage(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.csv")]) == 1
        assert capsys.readouterr().out == ""

    def test_parse_error_is_fatal(self, tmp_path, capsys, caplog):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "deposit, one, 2, 2.0",
        ]))

        assert main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""
        assert "line 3" in caplog.text

    def test_undecodable_file_is_fatal(self, tmp_path, capsys, caplog):
        csv_file = tmp_path / "test.csv"
        csv_file.write_bytes(b"\xff\xfe, 1, 2, 1.0")

        assert main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""
        assert "cannot decode input" in caplog.text

    def test_large_deposit_is_reported_exactly(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 10000000000000000000000000",
            "deposit, 1, 2, 0.0001",
        ]))

        assert main([str(csv_file)]) == 0
        assert capsys.readouterr().out == (
            "client,available,held,total,locked\n"
            "1,10000000000000000000000000.0001,0.0000,10000000000000000000000000.0001,false\n"
        )
