import os, stat, time, uuid, logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait as W
from selenium.webdriver.support import expected_conditions as EC

from .constants import EVIDENCE_DIR, PREFIXO_ARQUIVO, SUFIXOS_PARCIAIS

log = logging.getLogger("coletor")


class ColetaError(RuntimeError):
    """Falha na coleta das planilhas do portal."""


class DownloadError(ColetaError):
    """O arquivo esperado não apareceu no diretório de saída."""


def get_run_dir(base: Optional[Path] = None) -> Path:
    ts = datetime.now().strftime("coleta_%Y-%m-%d_%H-%M-%S")
    run_dir = Path(base or EVIDENCE_DIR) / ts
    # subpastas
    for sub in ("html", "png"):
        (run_dir / sub).mkdir(parents=True, exist_ok=True)
    return run_dir


def download_file_path(output, prefixo: str, mes: str, ano: str) -> Path:
    """Caminho final da planilha, no formato esperado pelo parser."""
    return Path(output) / f"{PREFIXO_ARQUIVO}-{prefixo}-{mes}-{ano}.xls"


def arquivo_mais_recente(diretorio) -> Path:
    """Arquivo com a modificação mais recente dentro de `diretorio`."""
    mais_recente: Optional[Path] = None
    maior_mtime = -1
    with os.scandir(diretorio) as entradas:
        for entrada in entradas:
            # stat falho (ex.: link quebrado) é erro, não entrada ignorada
            st = entrada.stat()
            if not stat.S_ISREG(st.st_mode):
                continue
            mtime = st.st_mtime_ns
            if mtime > maior_mtime:
                maior_mtime = mtime
                mais_recente = Path(entrada.path)
    if mais_recente is None:
        raise FileNotFoundError(f"Nenhum arquivo encontrado em {diretorio}")
    return mais_recente


def nomeia_download(diretorio, destino) -> Path:
    """Dá o nome `destino` ao último arquivo modificado em `diretorio`."""
    destino = Path(destino)
    origem = arquivo_mais_recente(diretorio)
    if origem.resolve() == destino.resolve():
        return destino
    if destino.exists():
        raise FileExistsError(f"Arquivo de destino já existe: {destino}")
    log.debug("Renomeando %s -> %s", origem, destino)
    try:
        origem.rename(destino)
    except OSError as e:
        raise OSError(
            e.errno, f"Erro renomeando último arquivo modificado ({origem})->({destino}): {e.strerror}"
        ) from e
    return destino


def download_concluido(diretorio, desde: float) -> bool:
    """Há algum arquivo finalizado, modificado a partir de `desde`?"""
    for p in Path(diretorio).iterdir():
        if p.name.endswith(SUFIXOS_PARCIAIS):
            continue
        try:
            st = p.stat()
        except FileNotFoundError:
            # o navegador renomeou o temporário entre a listagem e o stat
            continue
        if stat.S_ISREG(st.st_mode) and st.st_mtime >= desde:
            return True
    return False


def espera_download(diretorio, desde: float, timeout: float, intervalo: float = 0.5):
    """Espera o navegador terminar de gravar o download em `diretorio`."""
    fim = time.monotonic() + timeout
    while True:
        if download_concluido(diretorio, desde):
            return
        if time.monotonic() >= fim:
            raise DownloadError(
                f"Nenhum download concluído em {diretorio} após {timeout:.0f}s"
            )
        time.sleep(intervalo)


def espera_dom(driver, timeout: float = 20):
    W(driver, timeout).until(
        lambda d: d.execute_script("return document.readyState") == "complete"
    )


def espera_visivel(driver, xpath: str, timeout: float = 30):
    return W(driver, timeout).until(
        EC.visibility_of_element_located((By.XPATH, xpath))
    )


def salva_evidencia(driver, prefixo: str, base_dir: Optional[Path] = None) -> Path:
    """Salva HTML + screenshot para debug."""
    base = Path(base_dir or EVIDENCE_DIR)
    uid = uuid.uuid4().hex[:8]
    html = base / "html" / f"{prefixo}_{uid}.html"
    png = base / "png" / f"{prefixo}_{uid}.png"
    html.parent.mkdir(parents=True, exist_ok=True)
    png.parent.mkdir(parents=True, exist_ok=True)
    html.write_text(driver.page_source, encoding="utf-8")
    driver.save_screenshot(str(png))
    log.info("Evidência salva: %s", png)
    return png
