import json

import pytest

from travel_quote.scripts.quote import main


class TestQuoteCli:
    def test_quote_with_default_catalog(self, clean_env, capsys):
        assert main(["--zone", "Europa", "--category", "standard", "--duration", "10", "--ages", "30"]) == 0

        out = capsys.readouterr().out
        assert "[OK] Standard / Europa / 10 days / 1 traveler(s)" in out
        assert "112.00 USD" in out

    def test_compare_when_category_omitted(self, clean_env, capsys):
        assert main(["--zone", "Asia", "--duration", "3", "--ages", "30", "70"]) == 0

        out = capsys.readouterr().out
        assert out.count("[OK]") == 3

    def test_json_output_from_dates(self, clean_env, capsys):
        code = main(
            [
                "--zone", "Europa", "--category", "premium",
                "--departure", "2026-01-10", "--return", "2026-01-12",
                "--ages", "130", "--json",
            ]
        )

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["plan"] == "Premium"
        assert data["duration"] == 2
        assert data["subtotal"] == pytest.approx(12 * 1.4 * 2)
        assert data["warnings"][0]["age"] == 130

    @pytest.mark.parametrize(
        "argv",
        [
            ["--zone", "Atlantida", "--category", "standard", "--duration", "5", "--ages", "30"],
            ["--zone", "Europa", "--category", "standard", "--duration", "5"],
            ["--zone", "Europa", "--category", "standard", "--ages", "30"],
            ["--zone", "Europa", "--category", "standard", "--duration", "5", "--ages", "130", "--strict-ages"],
            ["--zone", "Europa", "--category", "stand", "--duration", "5", "--ages", "30", "--exact"],
            ["--category", "standard", "--duration", "5", "--ages", "30"],
        ],
    )
    def test_errors_exit_with_status_2(self, clean_env, capsys, argv):
        assert main(argv) == 2
        assert "[ERROR]" in capsys.readouterr().err

    def test_dump_config(self, clean_env, capsys, tmp_path):
        out_path = tmp_path / "snapshot.json"

        assert main(["--dump-config", str(out_path)]) == 0

        snapshot = json.loads(out_path.read_text(encoding="utf-8"))
        assert [p["name"] for p in snapshot["plans"]] == ["Basic", "Standard", "Premium"]
        assert len(snapshot["zones"]) == 9
        assert "[OK] Snapshot saved" in capsys.readouterr().out
