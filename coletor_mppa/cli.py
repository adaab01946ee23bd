import argparse, json, logging, os, sys
from pathlib import Path
from typing import List, Optional

from .constants import OUTPUT_FOLDER
from .utils import get_run_dir
from .pipeline import run


def setup_logger(debug: bool = False, logfile: Path | None = None) -> logging.Logger:
    fmt = "%(asctime)s - %(levelname)s - %(message)s"

    # stdout fica reservado para o resultado da coleta
    handlers: List[logging.Handler] = [
        logging.FileHandler(logfile or "coletor.log", "w", "utf-8"),
        logging.StreamHandler(sys.stderr),
    ]

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=fmt,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("coletor")


def mes_valido(valor: str) -> str:
    """Aceita "5" ou "05" e devolve sempre com dois dígitos."""
    try:
        n = int(valor)
    except ValueError:
        raise argparse.ArgumentTypeError(f"mês inválido: {valor!r}") from None
    if not 1 <= n <= 12:
        raise argparse.ArgumentTypeError(f"mês fora do intervalo 1..12: {valor!r}")
    return f"{n:02d}"


def ano_valido(valor: str) -> str:
    if not (len(valor) == 4 and valor.isdigit()):
        raise argparse.ArgumentTypeError(f"ano inválido: {valor!r}")
    return valor


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Coletor de contracheques e indenizações do MPPA"
    )
    ap.add_argument("--mes", type=mes_valido, default=os.getenv("MONTH"))
    ap.add_argument("--ano", type=ano_valido, default=os.getenv("YEAR"))
    ap.add_argument("--output", type=Path, default=OUTPUT_FOLDER)
    ap.add_argument("--visible", action="store_true")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args(argv)
    if args.mes is None or args.ano is None:
        ap.error("informe --mes e --ano (ou as variáveis MONTH e YEAR)")
    return args


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    run_dir = get_run_dir()
    logger = setup_logger(args.debug, logfile=run_dir / "coletor.log")
    try:
        arquivos = run(args.ano, args.mes, args.output, args.visible, base_dir=run_dir)
    except Exception:
        logger.exception("Falha geral")
        sys.exit(1)

    print(
        json.dumps(
            {"mes": args.mes, "ano": args.ano, "arquivos": [str(a) for a in arquivos]},
            ensure_ascii=False,
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
