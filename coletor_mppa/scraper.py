"""
Passos de navegação no portal de transparência do MPPA.

Cada relatório (contracheques e indenizações) segue a mesma sequência:
abre o relatório, confere o mês/ano já selecionados (lidos do atributo
`placeholder` dos campos de filtro), troca o que for diferente, libera o
download para o diretório de saída e exporta a planilha.
"""

import logging, time
from pathlib import Path
from typing import NamedTuple

from selenium import webdriver
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait as W
from selenium.webdriver.support import expected_conditions as EC

# ---- módulos do próprio projeto -------------------------------------------
from .constants import (
    BASE_URL,
    CONTRACHEQUES,
    DOWNLOAD_TIMEOUT,
    ELEMENT_TIMEOUT,
    INDENIZACOES,
    MESES,
    TIMEOUT_BETWEEN_STEPS,
)
from .driver import permite_downloads
from .seletores import seletor
from .utils import (
    ColetaError,
    DownloadError,
    espera_dom,
    espera_download,
    espera_visivel,
    nomeia_download,
    salva_evidencia,
)

# ----------------------------------------------------------------------------

logger = logging.getLogger("coletor")


class SelecaoError(ColetaError):
    """Não foi possível ler ou alterar o filtro de mês/ano."""


class Selecao(NamedTuple):
    """Mês (por extenso) e ano selecionados no portal."""

    mes: str
    ano: str


# --------------------------------------------------------------------------- #
# Utilidades                                                                  #
# --------------------------------------------------------------------------- #


def nome_do_mes(mes: str) -> str:
    try:
        return MESES[mes]
    except KeyError:
        raise ValueError(f"Mês inválido: {mes!r} (esperado 01..12)") from None


def pausa(segundos: float = TIMEOUT_BETWEEN_STEPS):
    time.sleep(segundos)


def clica(driver: webdriver.Chrome, xpath: str, timeout: float = ELEMENT_TIMEOUT):
    """Clica no elemento assim que ele estiver visível."""
    espera_visivel(driver, xpath, timeout).click()


def le_placeholder(
    driver: webdriver.Chrome, xpath: str, timeout: float = ELEMENT_TIMEOUT
) -> str:
    """
    Lê o atributo "placeholder" do campo de filtro.
    Se o campo não aparecer, o TimeoutException do selenium sobe; se aparecer
    sem o atributo, levanta SelecaoError.
    """
    campo = W(driver, timeout).until(
        EC.presence_of_element_located((By.XPATH, xpath))
    )
    valor = campo.get_attribute("placeholder")
    if valor is None:
        raise SelecaoError(f'O campo {xpath} não possui o atributo "placeholder"')
    return valor


def define_valor(
    driver: webdriver.Chrome, xpath: str, valor: str, timeout: float = ELEMENT_TIMEOUT
):
    """Preenche o campo de filtro e dispara os eventos que o portal escuta."""
    campo = espera_visivel(driver, xpath, timeout)
    driver.execute_script(
        "arguments[0].value = arguments[1];"
        "arguments[0].dispatchEvent(new Event('input', {bubbles: true}));"
        "arguments[0].dispatchEvent(new Event('change', {bubbles: true}));",
        campo,
        valor,
    )


def le_selecao(
    driver: webdriver.Chrome, relatorio: str, passo: float, espera: float = ELEMENT_TIMEOUT
) -> Selecao:
    mes = le_placeholder(driver, seletor(relatorio, "mes"), espera)
    pausa(passo)
    ano = le_placeholder(driver, seletor(relatorio, "ano"), espera)
    pausa(passo)
    return Selecao(mes=mes, ano=ano)


def ajusta_filtros(
    driver: webdriver.Chrome,
    relatorio: str,
    ano: str,
    mes: str,
    atual: Selecao,
    passo: float,
    espera: float = ELEMENT_TIMEOUT,
) -> Selecao:
    """Troca ano e mês apenas quando diferem do que o portal já mostra."""
    mes_extenso = nome_do_mes(mes)
    if atual.ano != ano:
        logger.info("Selecionando o ano...")
        define_valor(driver, seletor(relatorio, "ano"), ano, espera)
        pausa(passo)
    if atual.mes != mes_extenso:
        logger.info("Selecionando o mês...")
        define_valor(driver, seletor(relatorio, "mes"), mes_extenso, espera)
        pausa(passo)
    return Selecao(mes=mes_extenso, ano=ano)


def prepara_download(driver: webdriver.Chrome, output: Path, relatorio: str, evidencias):
    permite_downloads(driver, output)
    if evidencias is not None:
        salva_evidencia(driver, f"selecao_{relatorio}", evidencias)


# --------------------------------------------------------------------------- #
# Navegação                                                                   #
# --------------------------------------------------------------------------- #


def seleciona_contracheques(
    driver: webdriver.Chrome,
    ano: str,
    mes: str,
    output: Path,
    passo: float = TIMEOUT_BETWEEN_STEPS,
    evidencias: Path | None = None,
    espera: float = ELEMENT_TIMEOUT,
) -> Selecao:
    """
    Abre o relatório de contracheques e deixa selecionados `mes`/`ano`.
    Devolve o mês/ano que o portal mostrava ao abrir (lidos dos placeholders),
    que `seleciona_indenizacoes` compara com o pedido.
    """
    nome_do_mes(mes)
    driver.get(BASE_URL)
    espera_dom(driver, espera)
    pausa(passo)
    clica(driver, seletor(CONTRACHEQUES, "menu"), espera)
    pausa(passo)

    atual = le_selecao(driver, CONTRACHEQUES, passo, espera)
    logger.debug("Seleção atual no portal: %s/%s", atual.mes, atual.ano)
    ajusta_filtros(driver, CONTRACHEQUES, ano, mes, atual, passo, espera)
    prepara_download(driver, output, CONTRACHEQUES, evidencias)
    return atual


def seleciona_indenizacoes(
    driver: webdriver.Chrome,
    ano: str,
    mes: str,
    output: Path,
    selecao: Selecao,
    passo: float = TIMEOUT_BETWEEN_STEPS,
    evidencias: Path | None = None,
    espera: float = ELEMENT_TIMEOUT,
) -> Selecao:
    """
    Abre "Verbas Indenizatórias e Outras Remunerações Temporárias".
    `selecao` é o que o portal mostrava ao abrir os contracheques; ano e mês
    só são trocados quando diferem do pedido.
    """
    clica(driver, seletor(INDENIZACOES, "menu"), espera)
    pausa(passo)
    espera_visivel(driver, seletor(INDENIZACOES, "pronto"), espera)

    selecao = ajusta_filtros(driver, INDENIZACOES, ano, mes, selecao, passo, espera)
    prepara_download(driver, output, INDENIZACOES, evidencias)
    return selecao


def exporta_planilha(
    driver: webdriver.Chrome,
    relatorio: str,
    destino: Path,
    download_timeout: float = DOWNLOAD_TIMEOUT,
    espera: float = ELEMENT_TIMEOUT,
) -> Path:
    """
    Clica no botão de exportar para Excel, espera o download terminar e
    renomeia o arquivo baixado para `destino`.
    """
    destino = Path(destino)
    output = destino.parent
    # o mtime do sistema de arquivos pode ficar um pouco atrás de time.time()
    inicio = time.time() - 1
    clica(driver, seletor(relatorio, "exportar"), espera)
    espera_download(output, inicio, download_timeout)

    try:
        nomeia_download(output, destino)
    except OSError as e:
        raise DownloadError(f"Erro renomeando arquivo ({destino}): {e}") from e
    if not destino.exists():
        raise DownloadError(f"Download do arquivo de {destino} não realizado")
    return destino
