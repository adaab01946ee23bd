from typing import List, Optional
import logging, time
from pathlib import Path

from .constants import (
    CONTRACHEQUES,
    DOWNLOAD_TIMEOUT,
    ELEMENT_TIMEOUT,
    GENERAL_TIMEOUT,
    INDENIZACOES,
    TIMEOUT_BETWEEN_STEPS,
)
from .driver import build as new_driver
from .scraper import (
    exporta_planilha,
    seleciona_contracheques,
    seleciona_indenizacoes,
)
from .utils import download_file_path, salva_evidencia

logger = logging.getLogger("coletor")


class Prazo:
    """Prazo global da coleta, conferido entre um passo e outro."""

    def __init__(self, segundos: float):
        self.segundos = segundos
        self.fim = time.monotonic() + segundos

    def restante(self) -> float:
        return self.fim - time.monotonic()

    def limita(self, teto: float) -> float:
        """`teto`, encurtado para não passar do fim do prazo."""
        return max(0.0, min(teto, self.restante()))

    def confere(self, etapa: str):
        if self.restante() <= 0:
            raise TimeoutError(
                f"Tempo limite de {self.segundos:.0f}s excedido antes de: {etapa}"
            )


def run(
    ano: str,
    mes: str,
    output: Path,
    visible: bool = False,
    base_dir: Optional[Path] = None,
    general_timeout: float = GENERAL_TIMEOUT,
    passo: float = TIMEOUT_BETWEEN_STEPS,
    download_timeout: float = DOWNLOAD_TIMEOUT,
    element_timeout: float = ELEMENT_TIMEOUT,
) -> List[Path]:
    """
    Baixa as planilhas de contracheques e indenizações de `mes`/`ano`.
    Devolve os caminhos dos arquivos na ordem [contracheques, indenizações].
    """
    output = Path(output)
    output.mkdir(parents=True, exist_ok=True)
    prazo = Prazo(general_timeout)

    driver = new_driver(visible, download_dir=output)
    driver.set_page_load_timeout(general_timeout)
    try:
        # Contracheques
        prazo.confere("seleção de contracheques")
        logger.info("Realizando seleção (%s/%s)...", mes, ano)
        selecao = seleciona_contracheques(
            driver,
            ano,
            mes,
            output,
            passo=passo,
            evidencias=base_dir,
            espera=prazo.limita(element_timeout),
        )
        logger.info("Seleção realizada com sucesso!")
        cq_fname = download_file_path(output, CONTRACHEQUES, mes, ano)
        prazo.confere("download de contracheques")
        logger.info("Fazendo download do contracheque (%s)...", cq_fname)
        exporta_planilha(
            driver,
            CONTRACHEQUES,
            cq_fname,
            download_timeout=prazo.limita(download_timeout),
            espera=prazo.limita(element_timeout),
        )
        logger.info("Download realizado com sucesso!")

        # Indenizações
        prazo.confere("seleção de indenizações")
        logger.info("Realizando seleção (%s/%s)...", mes, ano)
        seleciona_indenizacoes(
            driver,
            ano,
            mes,
            output,
            selecao,
            passo=passo,
            evidencias=base_dir,
            espera=prazo.limita(element_timeout),
        )
        logger.info("Seleção realizada com sucesso!")
        i_fname = download_file_path(output, INDENIZACOES, mes, ano)
        prazo.confere("download de indenizações")
        logger.info("Fazendo download das indenizações (%s)...", i_fname)
        exporta_planilha(
            driver,
            INDENIZACOES,
            i_fname,
            download_timeout=prazo.limita(download_timeout),
            espera=prazo.limita(element_timeout),
        )
        logger.info("Download realizado com sucesso!")

        prazo.confere("fim da coleta")
        return [cq_fname, i_fname]
    except Exception:
        if base_dir is not None:
            try:
                salva_evidencia(driver, "erro", base_dir)
            except Exception as e:
                logger.warning("Não foi possível salvar evidência: %s", e)
        raise
    finally:
        driver.quit()
