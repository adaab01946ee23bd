import json

import pytest

from coletor_mppa import cli


@pytest.fixture(autouse=True)
def sem_ambiente(monkeypatch):
    monkeypatch.delenv("MONTH", raising=False)
    monkeypatch.delenv("YEAR", raising=False)


# ── Argumentos ───────────────────────────────────────────────────────────────

def test_parse_args_normaliza_mes():
    args = cli.parse_args(["--mes", "5", "--ano", "2021"])
    assert args.mes == "05"
    assert args.ano == "2021"
    assert not args.visible


def test_parse_args_do_ambiente(monkeypatch):
    monkeypatch.setenv("MONTH", "11")
    monkeypatch.setenv("YEAR", "2020")
    args = cli.parse_args([])
    assert (args.mes, args.ano) == ("11", "2020")


@pytest.mark.parametrize(
    "argv",
    [
        ["--mes", "13", "--ano", "2021"],
        ["--mes", "jan", "--ano", "2021"],
        ["--mes", "05", "--ano", "21"],
        ["--mes", "05"],
    ],
)
def test_parse_args_invalidos(argv):
    with pytest.raises(SystemExit):
        cli.parse_args(argv)


# ── Execução ─────────────────────────────────────────────────────────────────

def test_main_imprime_arquivos(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(cli, "get_run_dir", lambda: tmp_path)
    arquivos = [tmp_path / "a.xls", tmp_path / "b.xls"]
    monkeypatch.setattr(cli, "run", lambda *a, **k: arquivos)

    cli.main(["--mes", "05", "--ano", "2021", "--output", str(tmp_path)])

    saida = json.loads(capsys.readouterr().out)
    assert saida == {"mes": "05", "ano": "2021", "arquivos": [str(a) for a in arquivos]}
    assert (tmp_path / "coletor.log").exists()


def test_main_falha_sai_com_1(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(cli, "get_run_dir", lambda: tmp_path)

    def quebra(*a, **k):
        raise TimeoutError("prazo")

    monkeypatch.setattr(cli, "run", quebra)

    with pytest.raises(SystemExit) as exc:
        cli.main(["--mes", "05", "--ano", "2021", "--output", str(tmp_path)])
    assert exc.value.code == 1
    assert capsys.readouterr().out == ""
